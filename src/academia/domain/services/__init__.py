"""Domain services for Academia Pro.

Services contain the business logic of the access-control layer: grant
lifecycles, permission matching, and school context resolution.
"""

from academia.domain.services.effective_status import as_utc, calculate_effective_status
from academia.domain.services.password_validator import (
    PasswordValidationError,
    PasswordValidator,
    default_password_validator,
)
from academia.domain.services.permission_matcher import (
    grant_covers,
    matches_permission,
    school_permissions_cover,
    scoped_permission_matches,
)
from academia.domain.services.role_permissions import derive_permissions

__all__ = [
    "PasswordValidationError",
    "PasswordValidator",
    "as_utc",
    "calculate_effective_status",
    "default_password_validator",
    "derive_permissions",
    "grant_covers",
    "matches_permission",
    "school_permissions_cover",
    "scoped_permission_matches",
]
