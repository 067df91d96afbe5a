"""SQLAlchemy models for the Academia Pro access-control tables.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from academia.infrastructure.persistence.models.delegated_grant import (
    DelegatedAccountModel,
    DelegatedGrantMixin,
    DelegatedSchoolAdminModel,
)
from academia.infrastructure.persistence.models.permission import PermissionModel
from academia.infrastructure.persistence.models.role import RoleModel, RolePermissionModel
from academia.infrastructure.persistence.models.school import SchoolModel
from academia.infrastructure.persistence.models.user import UserModel

__all__ = [
    "DelegatedAccountModel",
    "DelegatedGrantMixin",
    "DelegatedSchoolAdminModel",
    "PermissionModel",
    "RoleModel",
    "RolePermissionModel",
    "SchoolModel",
    "UserModel",
]
