"""Entities module with hybrid entity-centric structure.

Each business concept has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer

Importing this module registers every table on ``SQLModel.metadata``.
"""

from .core.tenant import Tenant, TenantRepository, TenantStatus, TenantTable, TenantType
from .core.user import Permissions, User, UserRepository, UserRole, UserStatus, UserTable
from .service.price import (
    AuditAction,
    DefaultPrice,
    DefaultPriceRepository,
    DefaultPriceTable,
    PriceAuditLog,
    PriceAuditLogRepository,
    PriceAuditLogTable,
    PriceType,
    PriceView,
    PriceViewRepository,
    PriceViewTable,
    PrivatePrice,
    PrivatePriceRepository,
    PrivatePriceTable,
)
from .service.product import Product, ProductRepository, ProductTable

__all__ = [
    "AuditAction",
    "DefaultPrice",
    "DefaultPriceRepository",
    "DefaultPriceTable",
    "Permissions",
    "PriceAuditLog",
    "PriceAuditLogRepository",
    "PriceAuditLogTable",
    "PriceType",
    "PriceView",
    "PriceViewRepository",
    "PriceViewTable",
    "PrivatePrice",
    "PrivatePriceRepository",
    "PrivatePriceTable",
    "Product",
    "ProductRepository",
    "ProductTable",
    "Tenant",
    "TenantRepository",
    "TenantStatus",
    "TenantTable",
    "TenantType",
    "User",
    "UserRepository",
    "UserRole",
    "UserStatus",
    "UserTable",
]
