"""Entity package: prices.

Default and private prices, the price audit trail and company price views.
"""

from .entity import (
    AuditAction,
    DefaultPrice,
    PriceAuditLog,
    PriceType,
    PriceView,
    PrivatePrice,
)
from .repository import (
    DefaultPriceRepository,
    PriceAuditLogRepository,
    PriceViewRepository,
    PrivatePriceRepository,
)
from .table import DefaultPriceTable, PriceAuditLogTable, PriceViewTable, PrivatePriceTable

__all__ = [
    "AuditAction",
    "DefaultPrice",
    "DefaultPriceRepository",
    "DefaultPriceTable",
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
]
