"""Tenant entity module.

- Tenant: Domain entity
- TenantTable: Database persistence model
- TenantRepository: Data access layer
"""

from .entity import Tenant, TenantStatus, TenantType
from .repository import TenantRepository
from .table import TenantTable

__all__ = ["Tenant", "TenantRepository", "TenantStatus", "TenantTable", "TenantType"]
