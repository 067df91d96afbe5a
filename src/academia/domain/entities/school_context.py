"""Per-request tenant context.

A SchoolContext is derived from the calling user and the requested tenant on
every request. It is never persisted.
"""

from dataclasses import dataclass, field

from academia.domain.entities.school import School


@dataclass(frozen=True)
class SchoolContext:
    """Resolved tenant scope for a request.

    Attributes:
        school_id: The resolved tenant ID.
        school: Snapshot of the tenant row.
        user_role: Primary role of the calling user.
        permissions: Role-derived permission strings scoped to the tenant.
        is_super_admin: Whether the caller is a super admin.
        is_school_admin: Whether the caller administers this very tenant.
    """

    school_id: str
    school: School
    user_role: str | None
    permissions: frozenset[str] = field(default_factory=frozenset)
    is_super_admin: bool = False
    is_school_admin: bool = False
