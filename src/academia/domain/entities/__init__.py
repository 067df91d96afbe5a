"""Domain entities for Academia Pro.

Entities are pure Python dataclasses and enums that represent core business
concepts. They have no dependencies on infrastructure or external frameworks.
"""

from academia.domain.entities.auth_result import (
    Anonymous,
    Authenticated,
    AuthResult,
    IssuedTokens,
)
from academia.domain.entities.grant import TERMINAL_STATUSES, Grant, GrantStatus
from academia.domain.entities.request_context import RequestContext
from academia.domain.entities.school import School, SchoolStatus
from academia.domain.entities.school_context import SchoolContext
from academia.domain.entities.user import (
    ROLE_RANK,
    SYSTEM_USER_ID,
    Principal,
    UserRole,
    UserStatus,
    role_satisfies,
)

__all__ = [
    "Anonymous",
    "Authenticated",
    "AuthResult",
    "Grant",
    "GrantStatus",
    "IssuedTokens",
    "Principal",
    "RequestContext",
    "ROLE_RANK",
    "School",
    "SchoolContext",
    "SchoolStatus",
    "SYSTEM_USER_ID",
    "TERMINAL_STATUSES",
    "UserRole",
    "UserStatus",
    "role_satisfies",
]
