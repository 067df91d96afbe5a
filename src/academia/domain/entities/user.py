"""User roles, statuses and the authenticated principal.

A principal is the detached, read-only view of a user that the request
pipeline carries around once authentication has succeeded. It never holds
credential material.
"""

from dataclasses import dataclass, field
from enum import Enum


class UserRole(str, Enum):
    """Roles a user may hold."""

    SUPER_ADMIN = "super-admin"
    SCHOOL_ADMIN = "school-admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"
    DELEGATED_SUPER_ADMIN = "delegated-super-admin"
    DELEGATED_SCHOOL_ADMIN = "delegated-school-admin"


class UserStatus(str, Enum):
    """Account status of a user."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING = "pending"


# Higher numbers outrank lower ones. Delegated roles only match themselves.
ROLE_RANK: dict[str, int] = {
    UserRole.SUPER_ADMIN.value: 100,
    UserRole.SCHOOL_ADMIN.value: 60,
    UserRole.TEACHER.value: 40,
    UserRole.STUDENT.value: 20,
    UserRole.PARENT.value: 20,
}

SYSTEM_USER_ID = "system"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a request.

    Attributes:
        id: User ID (or ``system`` for the synthetic system principal).
        email: Lower-cased email address.
        roles: All roles held by the user, primary role first.
        status: Account status at authentication time.
        school_id: Tenant the user belongs to, if any.
    """

    id: str
    email: str
    roles: tuple[str, ...] = field(default_factory=tuple)
    status: str = UserStatus.ACTIVE.value
    school_id: str | None = None

    @property
    def role(self) -> str | None:
        """Primary role, the first entry of ``roles``."""
        return self.roles[0] if self.roles else None

    @property
    def is_system(self) -> bool:
        return self.id == SYSTEM_USER_ID

    @property
    def is_super_admin(self) -> bool:
        return UserRole.SUPER_ADMIN.value in self.roles

    def has_role(self, role: str | UserRole) -> bool:
        value = role.value if isinstance(role, UserRole) else role
        return value in self.roles


def role_satisfies(held: str, required: str) -> bool:
    """Check whether a held role meets a required role.

    Roles in the hierarchy satisfy any role ranked at or below them;
    roles outside it (the delegated roles) only satisfy themselves.
    """
    if held == required:
        return True
    held_rank = ROLE_RANK.get(held)
    required_rank = ROLE_RANK.get(required)
    if held_rank is None or required_rank is None:
        return False
    return held_rank > required_rank
