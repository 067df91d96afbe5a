"""Repositories for database access.

Each repository wraps an AsyncSession and exposes the queries a domain
service needs. Repositories flush but never commit; the caller owns the
transaction.
"""

from academia.infrastructure.persistence.repositories.delegated_grant_repository import (
    DelegatedAccountRepository,
    DelegatedSchoolAdminRepository,
)
from academia.infrastructure.persistence.repositories.permission_repository import (
    PermissionRepository,
)
from academia.infrastructure.persistence.repositories.role_repository import RoleRepository
from academia.infrastructure.persistence.repositories.school_repository import SchoolRepository
from academia.infrastructure.persistence.repositories.user_repository import UserRepository

__all__ = [
    "DelegatedAccountRepository",
    "DelegatedSchoolAdminRepository",
    "PermissionRepository",
    "RoleRepository",
    "SchoolRepository",
    "UserRepository",
]
