"""Role to permission templates for school contexts.

``derive_permissions`` is the single source of truth for which permission
strings a role receives inside a school. It is pure: the same role and school
always produce the same set.
"""

from academia.domain.entities.user import UserRole

_SUPER_ADMIN = (
    "schools:*",
    "users:*",
    "students:*",
    "staff:*",
    "reports:*",
    "settings:*",
)

# Expanded with the school ID as a third segment
_SCHOOL_ADMIN = (
    "schools:read",
    "schools:update",
    "users:read",
    "users:create",
    "users:update",
    "students:read",
    "students:create",
    "students:update",
    "staff:read",
    "staff:create",
    "staff:update",
    "reports:read",
    "settings:read",
    "settings:update",
)

_TEACHER = (
    "students:read",
    "students:update",
    "attendance:read",
    "attendance:create",
    "attendance:update",
    "grades:read",
    "grades:create",
    "grades:update",
    "reports:read",
)

_STUDENT = (
    "profile:read",
    "profile:update",
    "grades:read",
    "attendance:read",
    "timetable:read",
)

_PARENT = (
    "students:read",
    "grades:read",
    "attendance:read",
    "fees:read",
    "communication:read",
)

_TEMPLATES: dict[str, tuple[str, ...]] = {
    UserRole.SUPER_ADMIN.value: _SUPER_ADMIN,
    UserRole.TEACHER.value: _TEACHER,
    UserRole.STUDENT.value: _STUDENT,
    UserRole.PARENT.value: _PARENT,
}


def derive_permissions(role: str | UserRole | None, school_id: str) -> frozenset[str]:
    """Return the permission strings ``role`` holds within ``school_id``.

    Unknown roles, and a missing role, get no permissions.

    >>> sorted(derive_permissions("parent", "s1"))[:2]
    ['attendance:read', 'communication:read']
    """
    value = role.value if isinstance(role, UserRole) else role
    if value == UserRole.SCHOOL_ADMIN.value:
        return frozenset(f"{permission}:{school_id}" for permission in _SCHOOL_ADMIN)
    return frozenset(_TEMPLATES.get(value or "", ()))
