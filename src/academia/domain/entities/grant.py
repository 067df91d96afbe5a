"""Delegated grant statuses and the shape shared by both grant kinds."""

from datetime import datetime
from enum import Enum
from typing import Protocol


class GrantStatus(str, Enum):
    """Lifecycle status of a delegated account or delegated school admin."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    EXPIRED = "expired"
    REVOKED = "revoked"


TERMINAL_STATUSES = frozenset({GrantStatus.REVOKED.value, GrantStatus.EXPIRED.value})


class Grant(Protocol):
    """Anything carrying a stored status and an optional validity window."""

    status: str
    start_date: datetime | None
    expiry_date: datetime | None
