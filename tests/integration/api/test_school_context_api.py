"""Integration tests for tenant resolution on school routes."""

import pytest

from academia.domain.entities import UserRole
from conftest import API, auth_cookies

SCHOOL = f"{API}/school"


@pytest.mark.asyncio
async def test_unauthenticated_tenant_request(client, make_school):
    school = await make_school()
    response = await client.get(f"{SCHOOL}/context", headers={"x-school-id": school.id})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_school_id_is_required(client, make_school, make_user):
    school = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)

    response = await client.get(f"{SCHOOL}/context", headers=auth_cookies(admin))

    assert response.status_code == 400
    assert response.json()["message"] == (
        "School ID is required. Please provide x-school-id header"
    )


@pytest.mark.asyncio
async def test_context_for_own_school(client, make_school, make_user):
    school = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)

    response = await client.get(
        f"{SCHOOL}/context", headers={**auth_cookies(admin), "x-school-id": school.id}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["schoolId"] == school.id
    assert body["userRole"] == "school-admin"
    assert body["isSchoolAdmin"] is True
    assert body["isSuperAdmin"] is False
    assert f"schools:update:{school.id}" in body["permissions"]


@pytest.mark.asyncio
async def test_school_id_from_query_string(client, make_school, make_user):
    school = await make_school()
    teacher = await make_user(school_id=school.id)

    response = await client.get(
        f"{SCHOOL}/context", params={"schoolId": school.id}, headers=auth_cookies(teacher)
    )
    assert response.status_code == 200
    assert response.json()["schoolId"] == school.id


@pytest.mark.asyncio
async def test_other_school_is_forbidden(client, make_school, make_user):
    home = await make_school()
    away = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=home.id)

    response = await client.get(
        f"{SCHOOL}/context", headers={**auth_cookies(admin), "x-school-id": away.id}
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied to this school"


@pytest.mark.asyncio
async def test_header_takes_priority_over_body(client, make_school, make_user):
    home = await make_school(name="Home")
    away = await make_school(name="Away")
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=home.id)

    response = await client.patch(
        SCHOOL,
        json={"name": "Home Renamed", "schoolId": away.id},
        headers={**auth_cookies(admin), "x-school-id": home.id},
    )

    assert response.status_code == 200
    assert response.json()["id"] == home.id
    assert response.json()["name"] == "Home Renamed"


@pytest.mark.asyncio
async def test_body_school_id_is_checked(client, make_school, make_user):
    home = await make_school()
    away = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=home.id)

    response = await client.patch(
        SCHOOL, json={"name": "Hijacked", "schoolId": away.id}, headers=auth_cookies(admin)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_super_admin_enters_any_school(client, make_school, make_user):
    school = await make_school()
    root = await make_user(roles=[UserRole.SUPER_ADMIN.value])

    response = await client.get(
        f"{SCHOOL}/context", headers={**auth_cookies(root), "x-school-id": school.id}
    )

    assert response.status_code == 200
    assert response.json()["isSuperAdmin"] is True


@pytest.mark.asyncio
async def test_super_admin_unknown_school(client, make_user):
    root = await make_user(roles=[UserRole.SUPER_ADMIN.value])

    response = await client.get(
        f"{SCHOOL}/context", headers={**auth_cookies(root), "x-school-id": "no-such-school"}
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Unable to resolve school context"


@pytest.mark.asyncio
async def test_school_admin_cannot_change_status(client, make_school, make_user):
    school = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)

    response = await client.patch(
        SCHOOL,
        json={"status": "inactive"},
        headers={**auth_cookies(admin), "x-school-id": school.id},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "active"


@pytest.mark.asyncio
async def test_teacher_cannot_update_school(client, make_school, make_user):
    school = await make_school()
    teacher = await make_user(school_id=school.id)
    headers = {**auth_cookies(teacher), "x-school-id": school.id}

    assert (await client.get(SCHOOL, headers=headers)).status_code == 403
    response = await client.patch(SCHOOL, json={"name": "Nope"}, headers=headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Insufficient permissions. Required: schools:update"
