"""Unit tests for delegated grant lifecycle rules."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from academia.domain.entities import GrantStatus
from academia.domain.exceptions import ConflictError, ValidationError
from academia.domain.services.grant_lifecycle import (
    GrantChanges,
    apply_expiry_change,
    ensure_revocable,
    parse_end_time,
    reconcile_status,
    resolve_expiry,
    suspended_status,
    unsuspended_status,
    validate_window,
)


@dataclass
class FakeGrant:
    id: str = "g1"
    status: str = "active"
    start_date: datetime | None = None
    expiry_date: datetime | None = None


def test_end_date_and_time_combine_in_utc():
    expiry = resolve_expiry(date(2026, 5, 1), "17:30", None)
    assert expiry == datetime(2026, 5, 1, 17, 30, tzinfo=timezone.utc)


def test_end_date_without_time_is_start_of_day():
    assert resolve_expiry(date(2026, 5, 1), None, None) == datetime(
        2026, 5, 1, tzinfo=timezone.utc
    )


def test_end_date_wins_over_legacy_expiry():
    legacy = datetime(2030, 1, 1, tzinfo=timezone.utc)
    assert resolve_expiry(date(2026, 5, 1), None, legacy).year == 2026


def test_legacy_expiry_used_alone():
    legacy = datetime(2030, 1, 1, 8, 0)
    assert resolve_expiry(None, None, legacy) == datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert resolve_expiry(None, None, None) is None


def test_parse_end_time_rejects_garbage():
    assert parse_end_time("09:05").minute == 5
    with pytest.raises(ValidationError):
        parse_end_time("noon")


def test_window_must_be_ordered():
    start = datetime(2026, 1, 2, tzinfo=timezone.utc)
    validate_window(start, start + timedelta(days=1))
    validate_window(None, start)
    with pytest.raises(ValidationError, match="Expiry date must be after the start date"):
        validate_window(start, start)


def test_suspend_rules():
    assert suspended_status("active") == "suspended"
    assert suspended_status("inactive") == "suspended"
    for terminal in ("revoked", "expired"):
        with pytest.raises(ConflictError):
            suspended_status(terminal)


def test_unsuspend_requires_suspension():
    with pytest.raises(ConflictError):
        unsuspended_status(FakeGrant(status="active"))
    assert unsuspended_status(FakeGrant(status="suspended")) == "active"


def test_revoke_twice_conflicts():
    ensure_revocable("suspended")
    with pytest.raises(ConflictError):
        ensure_revocable("revoked")


@pytest.mark.asyncio
async def test_reconcile_writes_back_divergent_status():
    repository = AsyncMock()
    grant = FakeGrant(expiry_date=datetime.now(timezone.utc) - timedelta(days=1))

    status = await reconcile_status(grant, repository)

    assert status is GrantStatus.EXPIRED
    assert grant.status == "expired"
    repository.set_status.assert_awaited_once_with("g1", "expired")


@pytest.mark.asyncio
async def test_reconcile_leaves_matching_status_alone():
    repository = AsyncMock()
    status = await reconcile_status(FakeGrant(), repository)
    assert status is GrantStatus.ACTIVE
    repository.set_status.assert_not_awaited()


STORED_EXPIRY = datetime(2026, 5, 1, 17, 30, tzinfo=timezone.utc)


def test_end_time_alone_moves_stored_expiry():
    changes = GrantChanges(end_time="18:00", provided={"end_time"})
    assert apply_expiry_change(STORED_EXPIRY, changes) == datetime(
        2026, 5, 1, 18, 0, tzinfo=timezone.utc
    )


def test_end_time_alone_accepts_naive_stored_expiry():
    changes = GrantChanges(end_time="08:15", provided={"end_time"})
    naive = STORED_EXPIRY.replace(tzinfo=None)
    assert apply_expiry_change(naive, changes) == datetime(
        2026, 5, 1, 8, 15, tzinfo=timezone.utc
    )


def test_end_time_without_any_expiry_is_rejected():
    with pytest.raises(ValidationError):
        apply_expiry_change(None, GrantChanges(end_time="18:00", provided={"end_time"}))


def test_unrelated_changes_keep_expiry():
    changes = GrantChanges(notes="renewed", provided={"notes"})
    assert apply_expiry_change(STORED_EXPIRY, changes) == STORED_EXPIRY


def test_new_end_date_replaces_expiry():
    changes = GrantChanges(
        end_date=date(2026, 6, 2), end_time="09:00", provided={"end_date", "end_time"}
    )
    assert apply_expiry_change(STORED_EXPIRY, changes) == datetime(
        2026, 6, 2, 9, 0, tzinfo=timezone.utc
    )


@pytest.mark.parametrize("field_name", ["end_date", "expiry_date"])
def test_explicit_null_clears_expiry(field_name):
    changes = GrantChanges(provided={field_name})
    assert apply_expiry_change(STORED_EXPIRY, changes) is None
