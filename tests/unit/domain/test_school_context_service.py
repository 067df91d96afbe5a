"""Tests for school context resolution and tenant isolation."""

import pytest

from academia.domain.entities import UserRole
from academia.domain.services.school_context_service import SchoolContextService


@pytest.mark.asyncio
async def test_context_defaults_to_users_school(db_session, make_school, make_user):
    school = await make_school(code="HOME")
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)

    context = await SchoolContextService(db_session).get_school_context(admin.id)

    assert context.school_id == school.id
    assert context.school.code == "HOME"
    assert context.user_role == "school-admin"
    assert context.is_school_admin is True
    assert context.is_super_admin is False
    assert f"schools:update:{school.id}" in context.permissions


@pytest.mark.asyncio
async def test_school_admin_of_another_school_is_not_school_admin_here(
    db_session, make_school, make_user
):
    home = await make_school()
    away = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=home.id)

    context = await SchoolContextService(db_session).get_school_context(admin.id, away.id)

    assert context.school_id == away.id
    assert context.is_school_admin is False


@pytest.mark.asyncio
async def test_context_is_none_without_school(db_session, make_user):
    user = await make_user(school_id=None)
    service = SchoolContextService(db_session)

    assert await service.get_school_context(user.id) is None
    assert await service.get_school_context(user.id, "does-not-exist") is None
    assert await service.get_school_context("no-such-user") is None


@pytest.mark.asyncio
async def test_super_admin_may_enter_any_school_id(db_session, make_user):
    root = await make_user(roles=[UserRole.SUPER_ADMIN.value])
    assert await SchoolContextService(db_session).validate_school_access(root.id, "unknown-id")


@pytest.mark.asyncio
async def test_members_only_enter_their_own_school(db_session, make_school, make_user):
    home = await make_school()
    away = await make_school()
    teacher = await make_user(school_id=home.id)
    service = SchoolContextService(db_session)

    assert await service.validate_school_access(teacher.id, home.id)
    assert not await service.validate_school_access(teacher.id, away.id)
    assert not await service.validate_school_access("ghost", home.id)


@pytest.mark.asyncio
async def test_accessible_schools(db_session, make_school, make_user):
    first = await make_school()
    second = await make_school()
    await make_school(status="inactive")
    root = await make_user(roles=[UserRole.SUPER_ADMIN.value])
    teacher = await make_user(school_id=first.id)
    loner = await make_user(school_id=None)
    service = SchoolContextService(db_session)

    assert {s.id for s in await service.get_accessible_schools(root.id)} == {first.id, second.id}
    assert [s.id for s in await service.get_accessible_schools(teacher.id)] == [first.id]
    assert await service.get_accessible_schools(loner.id) == []
