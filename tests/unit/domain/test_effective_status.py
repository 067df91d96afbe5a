"""Unit tests for the effective status of delegated grants."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from academia.domain.entities import GrantStatus
from academia.domain.services.effective_status import as_utc, calculate_effective_status

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class FakeGrant:
    status: str = "active"
    start_date: datetime | None = None
    expiry_date: datetime | None = None


def test_active_without_window():
    assert calculate_effective_status(FakeGrant(), NOW) is GrantStatus.ACTIVE
    far_future = NOW + timedelta(days=365 * 100)
    assert calculate_effective_status(FakeGrant(), far_future) is GrantStatus.ACTIVE


def test_future_start_is_inactive():
    grant = FakeGrant(start_date=NOW + timedelta(days=1))
    assert calculate_effective_status(grant, NOW) is GrantStatus.INACTIVE


def test_past_expiry_is_expired():
    grant = FakeGrant(expiry_date=NOW - timedelta(minutes=1))
    assert calculate_effective_status(grant, NOW) is GrantStatus.EXPIRED


def test_inside_window_is_active():
    grant = FakeGrant(
        start_date=NOW - timedelta(days=1),
        expiry_date=NOW + timedelta(days=1),
    )
    assert calculate_effective_status(grant, NOW) is GrantStatus.ACTIVE


def test_suspension_outranks_window():
    grant = FakeGrant(status="suspended", expiry_date=NOW - timedelta(days=1))
    assert calculate_effective_status(grant, NOW) is GrantStatus.SUSPENDED


@pytest.mark.parametrize("status", ["revoked", "expired"])
def test_terminal_statuses_are_kept(status):
    grant = FakeGrant(status=status, expiry_date=NOW + timedelta(days=30))
    assert calculate_effective_status(grant, NOW) is GrantStatus(status)


def test_inactive_becomes_active_once_started():
    grant = FakeGrant(status="inactive", start_date=NOW - timedelta(hours=1))
    assert calculate_effective_status(grant, NOW) is GrantStatus.ACTIVE


def test_unsuspending_follows_the_window():
    expired = FakeGrant(status="suspended", expiry_date=NOW - timedelta(days=1))
    pending = FakeGrant(status="suspended", start_date=NOW + timedelta(days=1))
    current = FakeGrant(status="suspended")
    assert calculate_effective_status(expired, NOW, unsuspending=True) is GrantStatus.EXPIRED
    assert calculate_effective_status(pending, NOW, unsuspending=True) is GrantStatus.INACTIVE
    assert calculate_effective_status(current, NOW, unsuspending=True) is GrantStatus.ACTIVE


def test_naive_datetimes_are_treated_as_utc():
    naive_expiry = (NOW - timedelta(minutes=5)).replace(tzinfo=None)
    assert calculate_effective_status(FakeGrant(expiry_date=naive_expiry), NOW) is GrantStatus.EXPIRED
    assert as_utc(naive_expiry).tzinfo is timezone.utc
    assert as_utc(None) is None
