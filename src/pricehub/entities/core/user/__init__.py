"""User entity module.

This module contains all User-related classes organized by responsibility:
- User: Domain entity with role and permission helpers
- UserTable: Database persistence model
- UserRepository: Data access layer
"""

from .entity import Permissions, User, UserRole, UserStatus
from .repository import UserRepository
from .table import UserTable

__all__ = ["Permissions", "User", "UserRepository", "UserRole", "UserStatus", "UserTable"]
