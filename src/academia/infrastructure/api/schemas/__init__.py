"""API Schemas for request/response validation."""

from academia.infrastructure.api.schemas.auth_schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    UserProfileResponse,
)
from academia.infrastructure.api.schemas.common import CamelModel, MessageResponse
from academia.infrastructure.api.schemas.grant_schemas import (
    CreateGrantRequest,
    DelegatedGrantResponse,
    DelegatedSchoolAdminResponse,
    GrantStatusResponse,
    UpdateGrantRequest,
)
from academia.infrastructure.api.schemas.permission_schemas import (
    CreatePermissionRequest,
    PermissionResponse,
    UpdatePermissionRequest,
)
from academia.infrastructure.api.schemas.role_schemas import (
    CreateRoleRequest,
    RoleResponse,
    UpdateRoleRequest,
)
from academia.infrastructure.api.schemas.school_schemas import (
    CreateSchoolRequest,
    SchoolContextResponse,
    SchoolResponse,
    SchoolSummary,
    UpdateSchoolRequest,
)

__all__ = [
    "CamelModel",
    "ChangePasswordRequest",
    "CreateGrantRequest",
    "CreatePermissionRequest",
    "CreateRoleRequest",
    "CreateSchoolRequest",
    "DelegatedGrantResponse",
    "DelegatedSchoolAdminResponse",
    "GrantStatusResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PermissionResponse",
    "RefreshResponse",
    "RoleResponse",
    "SchoolContextResponse",
    "SchoolResponse",
    "SchoolSummary",
    "UpdateGrantRequest",
    "UpdatePermissionRequest",
    "UpdateRoleRequest",
    "UserProfileResponse",
]
