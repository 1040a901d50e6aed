"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator

from fastapi import Depends, HTTPException, Request
from loguru import logger
from sqlmodel import Session

from src.pricehub.api.http.app_data import ApplicationDependencies
from src.pricehub.core.models.claims import AuthContext
from src.pricehub.core.services import (
    AuthService,
    JwtGeneratorService,
    JwtVerificationService,
    PriceService,
    ProductService,
    TenantAdminService,
    UserManagementService,
)
from src.pricehub.entities import TenantRepository, UserRepository, UserRole

Guard = Callable[[Request], Awaitable[None]]

TENANT_ADMIN_ROLES = (
    UserRole.SUPPLIER_ADMIN,
    UserRole.COMPANY_ADMIN,
    UserRole.SUPER_ADMIN,
)


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session for the duration of the request."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_jwt_verify_service(request: Request) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.jwt_verify_service


def get_jwt_generation_service(request: Request) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.jwt_generation_service


async def authenticate(
    request: Request,
    db: Session = Depends(get_db_session),
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> AuthContext:
    """Authenticate the request using a Bearer access token.

    The token only identifies the user; role, tenant and status are reloaded
    from the database so that deactivation applies immediately.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="No token provided")
    if not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid token format")

    token = auth_header.split(" ", 1)[1].strip()
    claims = jwt_verify.verify_access_token(token)

    user = UserRepository(db).get(claims.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_operational:
        raise HTTPException(
            status_code=401, detail="User account is inactive or pending approval"
        )

    if user.is_super_admin:
        tenant_id = None
        tenant_type = "system"
    else:
        tenant = TenantRepository(db).get(user.tenant_id) if user.tenant_id else None
        if tenant is None or not tenant.is_operational:
            raise HTTPException(
                status_code=403, detail="Tenant account is inactive or pending approval"
            )
        tenant_id = tenant.id
        tenant_type = str(tenant.type)

    request.state.user_id = user.id
    request.state.tenant_id = tenant_id
    request.state.role = str(user.role)
    request.state.tenant_type = tenant_type
    request.state.permissions = user.permissions

    logger.debug("Authenticated user {} ({})", user.id, user.role)
    return AuthContext(
        user_id=user.id,
        email=user.email,
        tenant_id=tenant_id,
        role=str(user.role),
        tenant_type=tenant_type,
        permissions=user.permissions,
    )


def require_role(*allowed_roles: str) -> Guard:
    """Create a dependency that requires one of ``allowed_roles``."""

    async def dep(request: Request) -> None:
        role: str | None = getattr(request.state, "role", None)
        if role is None:
            raise HTTPException(status_code=401, detail="Authentication required")
        if role not in allowed_roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")

    return dep


def require_tenant_type(*allowed_types: str) -> Guard:
    """Create a dependency that requires the caller's tenant to be of a given type."""

    async def dep(request: Request) -> None:
        tenant_type: str | None = getattr(request.state, "tenant_type", None)
        if tenant_type is None:
            raise HTTPException(status_code=401, detail="Authentication required")
        if tenant_type not in allowed_types:
            raise HTTPException(
                status_code=403,
                detail=f"This action is only available to {' or '.join(allowed_types)} accounts",
            )

    return dep


def require_super_admin() -> Guard:
    return require_role(UserRole.SUPER_ADMIN)


def require_tenant_admin() -> Guard:
    return require_role(*TENANT_ADMIN_ROLES)


def require_permission(resource: str, action: str) -> Guard:
    """Create a dependency that requires ``permissions[resource][action]``.

    Super admins and tenant admins always pass.
    """

    async def dep(request: Request) -> None:
        role: str | None = getattr(request.state, "role", None)
        if role is None:
            raise HTTPException(status_code=401, detail="Authentication required")
        if role in TENANT_ADMIN_ROLES:
            return

        permissions: dict = getattr(request.state, "permissions", None) or {}
        if permissions.get(resource, {}).get(action) is not True:
            raise HTTPException(
                status_code=403,
                detail=f"Missing permission: {resource}.{action}",
            )

    return dep


def get_auth_service(
    db: Session = Depends(get_db_session),
    jwt_generator: JwtGeneratorService = Depends(get_jwt_generation_service),
    jwt_verifier: JwtVerificationService = Depends(get_jwt_verify_service),
) -> AuthService:
    return AuthService(db, jwt_generator, jwt_verifier)


def get_tenant_admin_service(db: Session = Depends(get_db_session)) -> TenantAdminService:
    return TenantAdminService(db)


def get_user_management_service(
    db: Session = Depends(get_db_session),
    caller: AuthContext = Depends(authenticate),
) -> UserManagementService:
    return UserManagementService(db, caller)


def get_product_service(
    db: Session = Depends(get_db_session),
    caller: AuthContext = Depends(authenticate),
) -> ProductService:
    return ProductService(db, caller)


def get_price_service(
    db: Session = Depends(get_db_session),
    caller: AuthContext = Depends(authenticate),
) -> PriceService:
    return PriceService(db, caller)
