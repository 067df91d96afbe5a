"""Permission string matching.

Permission strings have the form ``resource:action``. Either segment may be
the wildcard ``*``, and a lone ``*`` grants everything. Permissions derived
for a school carry a third segment holding the school ID,
``resource:action:school_id``.
"""

from collections.abc import Iterable

WILDCARD = "*"


def split_permission(permission: str) -> tuple[str, str]:
    """Split a permission string into ``(resource, action)``.

    A missing action is returned as an empty string so it never matches a
    concrete action by accident.

    Raises:
        ValueError: If the resource segment is empty.
    """
    resource, _, action = permission.partition(":")
    if not resource:
        raise ValueError(f"Invalid permission string: {permission!r}")
    return resource, action.split(":", 1)[0]


def matches_permission(granted: str, required: str) -> bool:
    """Check one granted permission against one required permission.

    Resource and action are compared independently, and ``*`` on either side
    of the grant matches any value in that position.

    >>> matches_permission("schools:*", "schools:create")
    True
    >>> matches_permission("*:read", "schools:read")
    True
    >>> matches_permission("users:create", "schools:create")
    False
    """
    if granted == WILDCARD or granted == required:
        return True
    granted_resource, _, granted_action = granted.partition(":")
    required_resource, _, required_action = required.partition(":")
    return (granted_resource == WILDCARD or granted_resource == required_resource) and (
        granted_action == WILDCARD or granted_action == required_action
    )


def grant_covers(granted: Iterable[str], required: str) -> bool:
    """Check whether any permission in a grant's set covers ``required``."""
    return any(matches_permission(permission, required) for permission in granted)


def scoped_permission_matches(granted: str, required: str, school_id: str) -> bool:
    """Match a school-scoped granted permission against a plain requirement.

    ``granted`` may be ``resource:action`` (unscoped, applies everywhere) or
    ``resource:action:school_id``; a scoped grant only applies to its own
    school.
    """
    parts = granted.split(":")
    if len(parts) >= 3:
        if parts[2] != school_id:
            return False
        granted = f"{parts[0]}:{parts[1]}"
    return matches_permission(granted, required)


def school_permissions_cover(
    granted: Iterable[str], required: str, school_id: str
) -> bool:
    return any(scoped_permission_matches(p, required, school_id) for p in granted)
