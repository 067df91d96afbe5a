"""Unit tests for permission string matching."""

import pytest

from academia.domain.services.permission_matcher import (
    grant_covers,
    matches_permission,
    school_permissions_cover,
    scoped_permission_matches,
    split_permission,
)


@pytest.mark.parametrize(
    "granted, required",
    [
        ("schools:read", "schools:read"),
        ("*", "schools:delete"),
        ("*", "anything:else"),
        ("schools:*", "schools:create"),
        ("*:read", "students:read"),
        ("*:*", "reports:update"),
    ],
)
def test_matching_permissions(granted, required):
    assert matches_permission(granted, required) is True


@pytest.mark.parametrize(
    "granted, required",
    [
        ("schools:read", "schools:update"),
        ("users:create", "schools:create"),
        ("schools:*", "users:read"),
        ("*:read", "students:update"),
        ("schools", "schools:read"),
    ],
)
def test_non_matching_permissions(granted, required):
    assert matches_permission(granted, required) is False


def test_grant_covers_any_entry():
    granted = ["users:read", "schools:*"]
    assert grant_covers(granted, "schools:delete") is True
    assert grant_covers(granted, "users:delete") is False
    assert grant_covers([], "users:read") is False


def test_split_permission():
    assert split_permission("schools:read") == ("schools", "read")
    assert split_permission("schools:read:school-1") == ("schools", "read")
    assert split_permission("schools") == ("schools", "")


def test_split_permission_rejects_empty_resource():
    with pytest.raises(ValueError):
        split_permission(":read")


def test_scoped_permission_only_applies_to_its_school():
    assert scoped_permission_matches("schools:read:s1", "schools:read", "s1") is True
    assert scoped_permission_matches("schools:read:s1", "schools:read", "s2") is False


def test_unscoped_permission_applies_to_every_school():
    assert scoped_permission_matches("students:read", "students:read", "s1") is True
    assert scoped_permission_matches("schools:*", "schools:update", "s9") is True


def test_school_permissions_cover():
    granted = frozenset({"schools:read:s1", "reports:read"})
    assert school_permissions_cover(granted, "schools:read", "s1") is True
    assert school_permissions_cover(granted, "reports:read", "s2") is True
    assert school_permissions_cover(granted, "schools:read", "s2") is False
