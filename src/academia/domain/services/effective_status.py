"""Effective status of delegated grants.

Both delegated accounts and delegated school admins store a status, but the
status that matters for authorization also depends on the grant's validity
window. The rules apply in this order:

1. A suspended grant stays suspended unless it is being unsuspended.
2. Revoked and expired grants keep their status.
3. A grant whose start date is still in the future is inactive.
4. A grant whose expiry date has passed is expired.
5. Anything else is active.
"""

from datetime import datetime, timezone

from academia.domain.entities.grant import TERMINAL_STATUSES, Grant, GrantStatus


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def calculate_effective_status(
    grant: Grant,
    now: datetime | None = None,
    *,
    unsuspending: bool = False,
) -> GrantStatus:
    """Compute the status a grant should have at ``now``.

    Args:
        grant: The grant to evaluate. It is not modified.
        now: Evaluation time. Defaults to the current UTC time.
        unsuspending: Set when lifting a suspension, so the window rules
            decide the resulting status instead of the stored one.

    Returns:
        The effective GrantStatus.
    """
    now = as_utc(now) or datetime.now(timezone.utc)

    if grant.status == GrantStatus.SUSPENDED.value and not unsuspending:
        return GrantStatus.SUSPENDED

    if grant.status in TERMINAL_STATUSES:
        return GrantStatus(grant.status)

    start_date = as_utc(grant.start_date)
    if start_date is not None and start_date > now:
        return GrantStatus.INACTIVE

    expiry_date = as_utc(grant.expiry_date)
    if expiry_date is not None and expiry_date < now:
        return GrantStatus.EXPIRED

    return GrantStatus.ACTIVE
