from fastapi import HTTPException
from loguru import logger
from sqlmodel import Session

from src.pricehub.core.models.auth import (
    AccessToken,
    CurrentUser,
    LoggedInUser,
    LoginInput,
    LoginResult,
    RegisteredUser,
    RegisterInput,
    RegisterResult,
    TenantSummary,
    TokenPair,
)
from src.pricehub.core.models.claims import TokenPayload
from src.pricehub.core.security import (
    ensure_password_strength,
    hash_password,
    verify_password,
)
from src.pricehub.core.services.jwt.jwt_gen import JwtGeneratorService
from src.pricehub.core.services.jwt.jwt_verify import JwtVerificationService
from src.pricehub.entities import (
    Tenant,
    TenantRepository,
    TenantStatus,
    TenantType,
    User,
    UserRepository,
    UserRole,
    UserStatus,
)

SYSTEM_TENANT_TYPE = "system"

PENDING_REGISTRATION_MESSAGE = (
    "Registration successful. Your account is pending approval by a super administrator."
)


def default_admin_role(tenant_type: TenantType) -> UserRole:
    if tenant_type == TenantType.SUPPLIER:
        return UserRole.SUPPLIER_ADMIN
    return UserRole.COMPANY_ADMIN


class AuthService:
    """Registration, login and token refresh for tenant users and super admins."""

    def __init__(
        self,
        db_session: Session,
        jwt_generator: JwtGeneratorService,
        jwt_verifier: JwtVerificationService,
    ):
        self._db_session = db_session
        self._jwt_generator = jwt_generator
        self._jwt_verifier = jwt_verifier
        self._user_repo = UserRepository(db_session)
        self._tenant_repo = TenantRepository(db_session)

    def register(self, data: RegisterInput) -> RegisterResult:
        """Create a pending tenant together with its first admin user.

        No tokens are issued; both records wait for super admin approval.
        """
        ensure_password_strength(data.password)
        email = str(data.email)

        if self._user_repo.get_by_email(email) or self._tenant_repo.get_by_email(email):
            raise HTTPException(status_code=409, detail="Email already registered")

        role = data.role or default_admin_role(data.tenant_type)
        if role.tenant_type != data.tenant_type:
            raise HTTPException(
                status_code=400,
                detail=f"Role {role} is not valid for a {data.tenant_type} tenant",
            )

        tenant = Tenant(
            name=data.tenant_name,
            type=data.tenant_type,
            email=email,
            phone=data.phone,
            address=data.address,
            postal_code=data.postal_code,
            status=TenantStatus.PENDING,
            is_active=False,
        )
        user = User(
            tenant_id=tenant.id,
            email=email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role=role,
            status=UserStatus.PENDING,
            is_active=False,
        )

        try:
            self._tenant_repo.create(tenant)
            self._user_repo.create(user)
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info(
            "Registered {} tenant {} with admin {}", tenant.type, tenant.id, user.id
        )
        return RegisterResult(
            message=PENDING_REGISTRATION_MESSAGE,
            user=RegisteredUser(
                id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                role=user.role,
                status=user.status,
                tenant_id=tenant.id,
                tenant_type=tenant.type,
                tenant_status=tenant.status,
            ),
        )

    def login(self, data: LoginInput) -> LoginResult:
        user = self._user_repo.get_by_email(str(data.email))
        # Same answer for unknown email and wrong password
        if user is None or not verify_password(data.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid email or password")

        if user.is_super_admin:
            if not user.is_operational:
                raise HTTPException(
                    status_code=403, detail="Account is pending approval or inactive"
                )
            tenant_type = SYSTEM_TENANT_TYPE
        else:
            tenant = self._tenant_repo.get(user.tenant_id) if user.tenant_id else None
            if tenant is None:
                raise HTTPException(status_code=403, detail="User account is invalid")
            if not tenant.is_operational:
                raise HTTPException(
                    status_code=403,
                    detail="Your company/supplier account is pending approval by a super administrator",
                )
            if not user.is_operational:
                raise HTTPException(
                    status_code=403,
                    detail="Your user account is pending approval by your organization administrator",
                )
            tenant_type = str(tenant.type)

        self._user_repo.touch_last_login(user.id)
        self._db_session.commit()

        payload = TokenPayload(
            user_id=user.id,
            tenant_id=user.tenant_id or "",
            role=user.role,
            tenant_type=tenant_type,
        )
        logger.info("User {} logged in", user.id)
        return LoginResult(
            user=LoggedInUser(
                id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                role=user.role,
                tenant_id=user.tenant_id,
                tenant_type=tenant_type,
            ),
            tokens=TokenPair(
                access_token=self._jwt_generator.generate_access_token(payload),
                refresh_token=self._jwt_generator.generate_refresh_token(payload),
            ),
        )

    def refresh_access_token(self, refresh_token: str) -> AccessToken:
        """Exchange a refresh token for a new access token.

        The user (and tenant) are re-checked so that deactivation takes effect
        at the next refresh. Every failure is reported the same way.
        """
        try:
            claims = self._jwt_verifier.verify_refresh_token(refresh_token)
            payload = self._payload_for_active_user(claims.user_id)
        except HTTPException as exc:
            logger.debug("Refresh rejected: {}", exc.detail)
            raise HTTPException(status_code=401, detail="Invalid refresh token") from exc

        return AccessToken(
            access_token=self._jwt_generator.generate_access_token(payload)
        )

    def _payload_for_active_user(self, user_id: str) -> TokenPayload:
        user = self._user_repo.get(user_id)
        if user is None or not user.is_operational:
            raise HTTPException(
                status_code=401, detail="User is inactive or pending approval"
            )

        if user.is_super_admin:
            return TokenPayload(
                user_id=user.id,
                tenant_id=user.tenant_id or "",
                role=user.role,
                tenant_type=SYSTEM_TENANT_TYPE,
            )

        tenant = self._tenant_repo.get(user.tenant_id) if user.tenant_id else None
        if tenant is None or not tenant.is_operational:
            raise HTTPException(
                status_code=401, detail="Tenant is inactive or pending approval"
            )
        return TokenPayload(
            user_id=user.id,
            tenant_id=tenant.id,
            role=user.role,
            tenant_type=tenant.type,
        )

    def get_current_user(self, user_id: str) -> CurrentUser:
        user = self._user_repo.get(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")

        tenant = self._tenant_repo.get(user.tenant_id) if user.tenant_id else None
        return CurrentUser(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            status=user.status,
            permissions=user.permissions,
            last_login_at=user.last_login_at,
            tenant=TenantSummary.model_validate(tenant) if tenant else None,
        )
