"""Tests for the role and permission guards."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException

from academia.core.config import Settings
from academia.domain.entities import (
    Authenticated,
    Principal,
    RequestContext,
    School,
    SchoolContext,
    UserRole,
)
from academia.domain.services.role_permissions import derive_permissions
from academia.infrastructure.api import dependencies
from academia.infrastructure.api.dependencies import (
    PermissionGuard,
    RolesGuard,
    SchoolPermissionGuard,
)

SCHOOL_ID = "school-1"


def principal(*roles: str, school_id: str | None = None) -> Principal:
    return Principal(id="u1", email="u1@example.com", roles=tuple(roles), school_id=school_id)


def tenant_context(user: Principal) -> RequestContext:
    school_context = SchoolContext(
        school_id=SCHOOL_ID,
        school=School(id=SCHOOL_ID, name="Test School", code="TS"),
        user_role=user.role,
        permissions=derive_permissions(user.role, SCHOOL_ID),
        is_super_admin=user.is_super_admin,
        is_school_admin=user.role == UserRole.SCHOOL_ADMIN.value,
    )
    return RequestContext(auth=Authenticated(user)).with_school(school_context)


@pytest.fixture
def match_all(monkeypatch):
    monkeypatch.setattr(
        dependencies, "get_settings", lambda: Settings(permission_match_mode="all")
    )


class TestRolesGuard:
    @pytest.mark.asyncio
    async def test_higher_role_satisfies_lower(self):
        user = principal(UserRole.SUPER_ADMIN.value)
        assert await RolesGuard(UserRole.SCHOOL_ADMIN)(user) is user

    @pytest.mark.asyncio
    async def test_any_held_role_may_match(self):
        user = principal(UserRole.TEACHER.value, UserRole.DELEGATED_SCHOOL_ADMIN.value)
        assert await RolesGuard(UserRole.DELEGATED_SCHOOL_ADMIN)(user) is user

    @pytest.mark.asyncio
    async def test_lower_role_is_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            await RolesGuard(UserRole.SCHOOL_ADMIN)(principal(UserRole.TEACHER.value))
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Insufficient role"

    @pytest.mark.asyncio
    async def test_delegated_role_does_not_rank(self):
        with pytest.raises(HTTPException):
            await RolesGuard(UserRole.TEACHER)(principal(UserRole.DELEGATED_SUPER_ADMIN.value))

    @pytest.mark.asyncio
    async def test_no_required_roles_allows_anyone(self):
        user = principal(UserRole.PARENT.value)
        assert await RolesGuard()(user) is user


class TestPermissionGuard:
    @pytest.mark.asyncio
    async def test_super_admin_bypasses_checks(self):
        user = principal(UserRole.SUPER_ADMIN.value)
        assert await PermissionGuard("schools:delete")(user, None) is user

    @pytest.mark.asyncio
    async def test_plain_user_is_rejected_with_required_list(self):
        with pytest.raises(HTTPException) as exc_info:
            await PermissionGuard("schools:read", "schools:update")(
                principal(UserRole.SCHOOL_ADMIN.value), None
            )
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == (
            "Insufficient permissions. Required: schools:read, schools:update"
        )

    @pytest.mark.asyncio
    async def test_delegated_any_mode(self):
        iam = MagicMock()
        iam.check_delegated_account_access = AsyncMock(side_effect=[False, True])
        user = principal(UserRole.DELEGATED_SUPER_ADMIN.value)

        with patch.object(dependencies, "IamService", return_value=iam):
            assert await PermissionGuard("schools:delete", "schools:read")(user, None) is user

        iam.check_delegated_account_access.assert_any_await("u1@example.com", "schools:read")

    @pytest.mark.asyncio
    async def test_delegated_all_mode(self, match_all):
        iam = MagicMock()
        iam.check_delegated_account_access = AsyncMock(side_effect=[False, True])
        user = principal(UserRole.DELEGATED_SUPER_ADMIN.value)

        with patch.object(dependencies, "IamService", return_value=iam):
            with pytest.raises(HTTPException) as exc_info:
                await PermissionGuard("schools:delete", "schools:read")(user, None)
        assert exc_info.value.status_code == 403


class TestSchoolPermissionGuard:
    @pytest.mark.asyncio
    async def test_role_derived_permissions(self):
        user = principal(UserRole.SCHOOL_ADMIN.value, school_id=SCHOOL_ID)
        context = tenant_context(user)
        assert await SchoolPermissionGuard("schools:update")(context, user, None) is context

    @pytest.mark.asyncio
    async def test_missing_role_permission_is_rejected(self):
        user = principal(UserRole.TEACHER.value, school_id=SCHOOL_ID)
        with pytest.raises(HTTPException) as exc_info:
            await SchoolPermissionGuard("schools:update")(tenant_context(user), user, None)
        assert exc_info.value.detail == "Insufficient permissions. Required: schools:update"

    @pytest.mark.asyncio
    async def test_super_admin_passes(self):
        user = principal(UserRole.SUPER_ADMIN.value)
        context = tenant_context(user)
        assert await SchoolPermissionGuard("schools:delete")(context, user, None) is context

    @pytest.mark.asyncio
    async def test_delegated_school_admin_grant(self):
        service = MagicMock()
        service.check_delegated_school_admin_access = AsyncMock(return_value=True)
        user = principal(UserRole.DELEGATED_SCHOOL_ADMIN.value, school_id=SCHOOL_ID)
        context = tenant_context(user)

        with patch.object(dependencies, "DelegatedSchoolAdminService", return_value=service):
            assert await SchoolPermissionGuard("students:read")(context, user, None) is context

        service.check_delegated_school_admin_access.assert_awaited_once_with(
            "u1@example.com", SCHOOL_ID, "students:read"
        )
