"""Core services exports."""

from .auth.auth_service import AuthService
from .catalog.product_service import ProductService

# Database Service
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

# Domain Services
from .pricing.price_service import PriceService
from .tenant.tenant_admin import TenantAdminService
from .user.user_management import UserManagementService

__all__ = [
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
    # Domain Services
    "AuthService",
    "PriceService",
    "ProductService",
    "TenantAdminService",
    "UserManagementService",
    # Database Service
    "DbManageService",
    "DbSessionService",
]
