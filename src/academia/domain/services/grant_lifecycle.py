"""Inputs and lifecycle rules shared by both kinds of delegated grant."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone

from academia.core.logging import get_logger
from academia.domain.entities.grant import TERMINAL_STATUSES, GrantStatus
from academia.domain.exceptions import ConflictError, ValidationError
from academia.domain.services.effective_status import calculate_effective_status

logger = get_logger(__name__)


@dataclass
class GrantDraft:
    """Everything needed to create a delegated grant.

    Either ``user_id`` or both ``first_name`` and ``last_name`` must be
    given. Expiry is taken from ``end_date`` (plus ``end_time``) when set,
    otherwise from the legacy ``expiry_date``.
    """

    email: str
    permissions: list[str]
    user_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    start_date: datetime | None = None
    end_date: date | datetime | None = None
    end_time: str | None = None
    expiry_date: datetime | None = None
    notes: str | None = None


@dataclass
class GrantChanges:
    """Partial update of a delegated grant. Only fields in ``provided`` apply."""

    permissions: list[str] | None = None
    start_date: datetime | None = None
    expiry_date: datetime | None = None
    end_date: date | datetime | None = None
    end_time: str | None = None
    notes: str | None = None
    provided: set[str] = field(default_factory=set)


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_end_time(end_time: str) -> time:
    """Parse an ``HH:MM`` string."""
    try:
        hours, minutes = end_time.split(":", 1)
        return time(int(hours), int(minutes))
    except ValueError as e:
        raise ValidationError(f"Invalid end time '{end_time}', expected HH:MM") from e


def resolve_expiry(
    end_date: date | datetime | None,
    end_time: str | None,
    expiry_date: datetime | None,
) -> datetime | None:
    """Work out a grant's expiry.

    ``end_date`` wins and is combined with ``end_time`` (UTC); without an
    end time it expires at the start of that day. The legacy
    ``expiry_date`` is used next. With neither, the grant never expires.
    """
    if end_date is not None:
        if isinstance(end_date, datetime):
            resolved = _to_utc(end_date)
        else:
            resolved = datetime.combine(end_date, time(0, 0), tzinfo=timezone.utc)
        if end_time:
            parsed = parse_end_time(end_time)
            resolved = resolved.replace(hour=parsed.hour, minute=parsed.minute, second=0, microsecond=0)
        return resolved
    if expiry_date is not None:
        return _to_utc(expiry_date)
    return None


def apply_expiry_change(current: datetime | None, changes: GrantChanges) -> datetime | None:
    """Expiry after a partial update.

    A new ``end_date`` is combined with ``end_time``. ``expiry_date`` is
    used next. An ``end_time`` on its own moves the time of the stored
    expiry. The expiry is cleared only by an explicit null ``end_date``
    or ``expiry_date``.

    Raises:
        ValidationError: If ``end_time`` is sent for a grant with no expiry.
    """
    provided = changes.provided
    if "end_date" in provided and changes.end_date is not None:
        return resolve_expiry(changes.end_date, changes.end_time, None)
    if "expiry_date" in provided:
        return resolve_expiry(None, None, changes.expiry_date)
    if "end_date" in provided:
        return None
    if "end_time" in provided and changes.end_time:
        if current is None:
            raise ValidationError("endTime requires an endDate when the grant has no expiry")
        return resolve_expiry(_to_utc(current).date(), changes.end_time, None)
    return current


def validate_window(start_date: datetime | None, expiry_date: datetime | None) -> None:
    if start_date is not None and expiry_date is not None:
        if _to_utc(expiry_date) <= _to_utc(start_date):
            raise ValidationError("Expiry date must be after the start date")


def suspended_status(current: str) -> str:
    """Status after suspending a grant.

    Raises:
        ConflictError: If the grant is revoked or expired.
    """
    if current in TERMINAL_STATUSES:
        raise ConflictError(f"Cannot suspend a {current} grant")
    return GrantStatus.SUSPENDED.value


def unsuspended_status(grant) -> str:
    """Status after lifting a suspension, decided by the validity window.

    Raises:
        ConflictError: If the grant is not suspended.
    """
    if grant.status != GrantStatus.SUSPENDED.value:
        raise ConflictError("Only suspended grants can be unsuspended")
    return calculate_effective_status(grant, unsuspending=True).value


def ensure_revocable(current: str) -> None:
    if current == GrantStatus.REVOKED.value:
        raise ConflictError("Grant is already revoked")


async def reconcile_status(grant, repository, now: datetime | None = None) -> GrantStatus:
    """Compute a grant's effective status and persist it if it changed.

    Args:
        grant: DelegatedAccountModel or DelegatedSchoolAdminModel.
        repository: The grant's repository, used for the write-back.
        now: Evaluation time. Defaults to the current UTC time.

    Returns:
        The effective status.
    """
    effective = calculate_effective_status(grant, now)
    if effective.value != grant.status:
        logger.info(
            "Delegated grant status reconciled",
            grant_id=grant.id,
            stored_status=grant.status,
            effective_status=effective.value,
        )
        await repository.set_status(grant.id, effective.value)
        grant.status = effective.value
    return effective
