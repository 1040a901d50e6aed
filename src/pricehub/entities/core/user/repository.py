"""User repository."""

from sqlalchemy import func
from sqlmodel import Session, col, select

from src.pricehub.entities.core._base import utcnow

from .entity import User, UserRole, UserStatus
from .table import UserTable


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_in_tenant(self, user_id: str, tenant_id: str) -> User | None:
        statement = select(UserTable).where(
            (UserTable.id == user_id) & (UserTable.tenant_id == tenant_id)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def create(self, user: User) -> User:
        row = UserTable(**user.model_dump())
        self._session.add(row)
        self._session.flush()
        return user

    def update(self, user: User) -> User:
        row = self._session.get(UserTable, user.id)
        if row is None:
            raise ValueError(f"User with id {user.id} not found")

        for key, value in user.model_dump(exclude={"id", "created_at"}).items():
            setattr(row, key, value)
        row.updated_at = utcnow()

        self._session.add(row)
        self._session.flush()
        return User.model_validate(row, from_attributes=True)

    def touch_last_login(self, user_id: str) -> None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            raise ValueError(f"User with id {user_id} not found")
        row.last_login_at = utcnow()
        self._session.add(row)
        self._session.flush()

    def list_by_tenant(self, tenant_id: str) -> list[User]:
        statement = (
            select(UserTable)
            .where(UserTable.tenant_id == tenant_id)
            .order_by(col(UserTable.created_at).asc())
        )
        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def list_by_role(self, role: UserRole) -> list[User]:
        statement = (
            select(UserTable)
            .where(UserTable.role == role)
            .order_by(col(UserTable.created_at).desc())
        )
        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def list_all(self) -> list[User]:
        statement = select(UserTable).order_by(col(UserTable.created_at).asc())
        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def set_status_for_tenant(
        self,
        tenant_id: str,
        from_status: UserStatus,
        to_status: UserStatus,
        is_active: bool,
    ) -> int:
        """Move every user of a tenant in ``from_status`` to ``to_status``."""
        statement = select(UserTable).where(
            (UserTable.tenant_id == tenant_id) & (UserTable.status == from_status)
        )
        rows = self._session.exec(statement).all()
        now = utcnow()
        for row in rows:
            row.status = to_status
            row.is_active = is_active
            row.updated_at = now
            self._session.add(row)
        self._session.flush()
        return len(rows)

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(UserTable)).one()
