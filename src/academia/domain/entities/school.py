"""School (tenant) entity."""

from dataclasses import dataclass
from enum import Enum


class SchoolStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


@dataclass(frozen=True)
class School:
    """Snapshot of a tenant row, safe to hold after the session closes."""

    id: str
    name: str
    code: str
    status: str = SchoolStatus.ACTIVE.value

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("School ID is required")
