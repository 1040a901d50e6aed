import math

from fastapi import HTTPException
from loguru import logger
from sqlmodel import Session

from src.pricehub.core.models.admin import (
    Pagination,
    Statistics,
    SuperAdminInput,
    TenantOut,
    TenantPage,
    TenantWithUsers,
    UserOut,
)
from src.pricehub.core.security import ensure_password_strength, hash_password
from src.pricehub.entities import (
    ProductRepository,
    Tenant,
    TenantRepository,
    TenantStatus,
    TenantType,
    User,
    UserRepository,
    UserRole,
    UserStatus,
)
from src.pricehub.entities.core._base import utcnow
from src.pricehub.runtime.context import get_config


class TenantAdminService:
    """Super admin operations: tenant approval, tenant status and super admin accounts."""

    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._tenant_repo = TenantRepository(db_session)
        self._user_repo = UserRepository(db_session)
        self._product_repo = ProductRepository(db_session)

    def _get_tenant(self, tenant_id: str) -> Tenant:
        tenant = self._tenant_repo.get(tenant_id)
        if tenant is None:
            raise HTTPException(status_code=404, detail="Tenant not found")
        return tenant

    def list_pending_tenants(self) -> list[TenantWithUsers]:
        """Tenants awaiting approval, oldest first, each with its users."""
        tenants = self._tenant_repo.list_by_status(TenantStatus.PENDING)
        return [
            TenantWithUsers(
                **TenantOut.model_validate(tenant).model_dump(),
                users=[
                    UserOut.model_validate(user)
                    for user in self._user_repo.list_by_tenant(tenant.id)
                ],
            )
            for tenant in tenants
        ]

    def list_tenants(
        self,
        status: TenantStatus | None = None,
        tenant_type: TenantType | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> TenantPage:
        pagination_cfg = get_config().pagination
        page = max(page, 1)
        limit = min(max(limit or pagination_cfg.default_limit, 1), pagination_cfg.max_limit)

        tenants, total = self._tenant_repo.search(
            status=status,
            tenant_type=tenant_type,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return TenantPage(
            tenants=[TenantOut.model_validate(t) for t in tenants],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit) if total else 0,
            ),
        )

    def approve_tenant(
        self,
        tenant_id: str,
        approved: bool,
        approver_id: str,
        reason: str | None = None,
    ) -> TenantOut:
        """Approve or reject a pending tenant.

        The tenant's pending users follow the decision: they become active on
        approval and rejected on rejection.
        """
        tenant = self._get_tenant(tenant_id)
        if tenant.status != TenantStatus.PENDING:
            raise HTTPException(
                status_code=400, detail=f"Tenant is already {tenant.status}"
            )

        if approved:
            tenant.status = TenantStatus.ACTIVE
            tenant.is_active = True
            tenant.approved_at = utcnow()
            tenant.approved_by_id = approver_id
            tenant.rejection_reason = None
            user_status, user_active = UserStatus.ACTIVE, True
        else:
            tenant.status = TenantStatus.REJECTED
            tenant.is_active = False
            tenant.rejection_reason = reason
            user_status, user_active = UserStatus.REJECTED, False

        try:
            updated = self._tenant_repo.update(tenant)
            moved = self._user_repo.set_status_for_tenant(
                tenant.id, UserStatus.PENDING, user_status, user_active
            )
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info(
            "Tenant {} {} by {} ({} users updated)",
            tenant.id,
            "approved" if approved else "rejected",
            approver_id,
            moved,
        )
        return TenantOut.model_validate(updated)

    def set_tenant_active(self, tenant_id: str, is_active: bool) -> TenantOut:
        tenant = self._get_tenant(tenant_id)
        tenant.is_active = is_active
        updated = self._tenant_repo.update(tenant)
        self._db_session.commit()
        logger.info("Tenant {} is_active set to {}", tenant.id, is_active)
        return TenantOut.model_validate(updated)

    def create_super_admin(self, data: SuperAdminInput) -> UserOut:
        ensure_password_strength(data.password)
        email = str(data.email)
        if self._user_repo.get_by_email(email):
            raise HTTPException(status_code=409, detail="Email already registered")

        user = User(
            tenant_id=None,
            email=email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=UserRole.SUPER_ADMIN,
            status=UserStatus.ACTIVE,
            is_active=True,
        )
        try:
            self._user_repo.create(user)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info("Created super admin {}", user.id)
        return UserOut.model_validate(user)

    def list_super_admins(self) -> list[UserOut]:
        return [
            UserOut.model_validate(user)
            for user in self._user_repo.list_by_role(UserRole.SUPER_ADMIN)
        ]

    def statistics(self) -> Statistics:
        tenants = self._tenant_repo
        return Statistics(
            total_tenants=tenants.count(),
            pending_tenants=tenants.count(status=TenantStatus.PENDING),
            active_tenants=tenants.count(status=TenantStatus.ACTIVE),
            rejected_tenants=tenants.count(status=TenantStatus.REJECTED),
            total_suppliers=tenants.count(tenant_type=TenantType.SUPPLIER),
            total_companies=tenants.count(tenant_type=TenantType.COMPANY),
            total_users=self._user_repo.count(),
            total_products=self._product_repo.count(),
        )
