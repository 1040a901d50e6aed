from fastapi import HTTPException
from loguru import logger
from sqlmodel import Session

from src.pricehub.core.models.admin import StaffUserInput, UserOut
from src.pricehub.core.models.claims import AuthContext
from src.pricehub.core.security import ensure_password_strength, hash_password
from src.pricehub.entities import (
    Permissions,
    User,
    UserRepository,
    UserRole,
    UserStatus,
)


class UserManagementService:
    """Tenant admin operations on the users of their own tenant."""

    def __init__(self, db_session: Session, caller: AuthContext):
        if caller.tenant_id is None:
            raise HTTPException(
                status_code=400, detail="User management requires a tenant account"
            )
        self._db_session = db_session
        self._tenant_id: str = caller.tenant_id
        self._tenant_type = caller.tenant_type
        self._caller = caller
        self._user_repo = UserRepository(db_session)

    def _get_member(self, user_id: str) -> User:
        user = self._user_repo.get_in_tenant(user_id, self._tenant_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def _save(self, user: User) -> UserOut:
        try:
            updated = self._user_repo.update(user)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        return UserOut.model_validate(updated)

    def list_users(self) -> list[UserOut]:
        return [
            UserOut.model_validate(user)
            for user in self._user_repo.list_by_tenant(self._tenant_id)
        ]

    def create_staff_user(self, data: StaffUserInput) -> UserOut:
        """Add an already-active user to the caller's tenant.

        The role defaults to the tenant's staff role and must belong to the
        caller's tenant type.
        """
        ensure_password_strength(data.password)
        role = data.role or UserRole(f"{self._tenant_type}_staff")
        if role.tenant_type != self._tenant_type:
            raise HTTPException(
                status_code=400,
                detail=f"Role {role} is not valid for a {self._tenant_type} tenant",
            )

        email = str(data.email)
        if self._user_repo.get_by_email(email):
            raise HTTPException(status_code=409, detail="Email already registered")

        user = User(
            tenant_id=self._tenant_id,
            email=email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=role,
            status=UserStatus.ACTIVE,
            is_active=True,
            permissions=data.permissions,
        )
        try:
            self._user_repo.create(user)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info(
            "User {} created {} {} in tenant {}",
            self._caller.user_id,
            role,
            user.id,
            self._tenant_id,
        )
        return UserOut.model_validate(user)

    def approve_user(self, user_id: str, approved: bool) -> UserOut:
        user = self._get_member(user_id)
        if user.status != UserStatus.PENDING:
            raise HTTPException(
                status_code=400, detail=f"User is already {user.status}"
            )
        user.status = UserStatus.ACTIVE if approved else UserStatus.REJECTED
        user.is_active = approved
        return self._save(user)

    def update_permissions(self, user_id: str, permissions: Permissions) -> UserOut:
        user = self._get_member(user_id)
        if user.role.is_admin:
            raise HTTPException(
                status_code=400, detail="Administrators already have every permission"
            )
        user.permissions = permissions
        return self._save(user)

    def set_user_active(self, user_id: str, is_active: bool) -> UserOut:
        if user_id == self._caller.user_id and not is_active:
            raise HTTPException(
                status_code=400, detail="You cannot deactivate your own account"
            )
        user = self._get_member(user_id)
        user.is_active = is_active
        return self._save(user)
