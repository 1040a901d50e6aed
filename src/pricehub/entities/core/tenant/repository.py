"""Tenant repository."""

from sqlalchemy import func
from sqlmodel import Session, col, select

from src.pricehub.entities.core._base import utcnow

from .entity import Tenant, TenantStatus, TenantType
from .table import TenantTable


class TenantRepository:
    """Data-access layer for tenants."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, tenant_id: str) -> Tenant | None:
        row = self._session.get(TenantTable, tenant_id)
        if row is None:
            return None
        return Tenant.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> Tenant | None:
        statement = select(TenantTable).where(TenantTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Tenant.model_validate(row, from_attributes=True)

    def create(self, tenant: Tenant) -> Tenant:
        row = TenantTable(**tenant.model_dump())
        self._session.add(row)
        self._session.flush()
        return tenant

    def update(self, tenant: Tenant) -> Tenant:
        row = self._session.get(TenantTable, tenant.id)
        if row is None:
            raise ValueError(f"Tenant with id {tenant.id} not found")

        for key, value in tenant.model_dump(exclude={"id", "created_at"}).items():
            setattr(row, key, value)
        row.updated_at = utcnow()

        self._session.add(row)
        self._session.flush()
        return Tenant.model_validate(row, from_attributes=True)

    def list_by_status(self, status: TenantStatus) -> list[Tenant]:
        """Tenants in ``status``, oldest first."""
        statement = (
            select(TenantTable)
            .where(TenantTable.status == status)
            .order_by(col(TenantTable.created_at).asc())
        )
        rows = self._session.exec(statement).all()
        return [Tenant.model_validate(row, from_attributes=True) for row in rows]

    def search(
        self,
        status: TenantStatus | None = None,
        tenant_type: TenantType | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Tenant], int]:
        """Filtered page of tenants, newest first, plus the unpaged total."""
        conditions = []
        if status is not None:
            conditions.append(TenantTable.status == status)
        if tenant_type is not None:
            conditions.append(TenantTable.type == tenant_type)

        statement = (
            select(TenantTable)
            .where(*conditions)
            .order_by(col(TenantTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        count_statement = select(func.count()).select_from(TenantTable).where(*conditions)

        rows = self._session.exec(statement).all()
        total = self._session.exec(count_statement).one()
        return [Tenant.model_validate(row, from_attributes=True) for row in rows], total

    def count(
        self,
        status: TenantStatus | None = None,
        tenant_type: TenantType | None = None,
    ) -> int:
        statement = select(func.count()).select_from(TenantTable)
        if status is not None:
            statement = statement.where(TenantTable.status == status)
        if tenant_type is not None:
            statement = statement.where(TenantTable.type == tenant_type)
        return self._session.exec(statement).one()
