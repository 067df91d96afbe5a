"""Default contents of the permission catalog and role bundles.

These are seeded into an empty database by ``init_database``.
"""

from academia.domain.entities.user import UserRole

DEFAULT_RESOURCES = (
    "schools",
    "users",
    "students",
    "staff",
    "reports",
    "analytics",
    "audit",
    "system",
    "settings",
)

DEFAULT_ACTIONS = ("create", "read", "update", "delete", "manage")


def default_catalog() -> list[tuple[str, str, str]]:
    """Return ``(name, resource, action)`` triples for the default catalog.

    Every resource gets each concrete action plus a ``resource:*`` wildcard,
    and the catalog ends with the global ``*`` entry.
    """
    entries: list[tuple[str, str, str]] = []
    for resource in DEFAULT_RESOURCES:
        for action in DEFAULT_ACTIONS + ("*",):
            entries.append((f"{resource}:{action}", resource, action))
    for action in DEFAULT_ACTIONS:
        entries.append((f"*:{action}", "*", action))
    entries.append(("*", "*", "*"))
    return entries


DEFAULT_ROLES: dict[str, tuple[str, list[str]]] = {
    UserRole.SUPER_ADMIN.value: ("Platform owner with unrestricted access", ["*"]),
    UserRole.SCHOOL_ADMIN.value: (
        "Administers a single school",
        [
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
        ],
    ),
    UserRole.TEACHER.value: ("Teaching staff", ["students:read", "students:update", "reports:read"]),
    UserRole.STUDENT.value: ("Enrolled student", []),
    UserRole.PARENT.value: ("Parent or guardian", ["students:read"]),
    UserRole.DELEGATED_SUPER_ADMIN.value: ("Holder of a delegated account", []),
    UserRole.DELEGATED_SCHOOL_ADMIN.value: ("Holder of a delegated school admin grant", []),
}
