"""Integration tests for delegated school admins."""

import pytest

from academia.domain.entities import UserRole
from conftest import API, auth_cookies, future, past

DELEGATED = f"{API}/school/delegated-admins"


def tenant_headers(user, school_id):
    return {**auth_cookies(user), "x-school-id": school_id}


@pytest.mark.asyncio
async def test_school_admin_manages_grants(client, make_school, make_user):
    school = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)
    member = await make_user(school_id=school.id)
    headers = tenant_headers(admin, school.id)

    created = await client.post(
        DELEGATED,
        json={"email": member.email, "userId": member.id, "permissions": ["students:read"]},
        headers=headers,
    )
    assert created.status_code == 201
    grant = created.json()
    assert grant["schoolId"] == school.id
    assert grant["createdBy"] == admin.id

    listed = await client.get(DELEGATED, headers=headers)
    assert [g["id"] for g in listed.json()] == [grant["id"]]

    patched = await client.patch(
        f"{DELEGATED}/{grant['id']}", json={"permissions": ["students:*"]}, headers=headers
    )
    assert patched.json()["permissions"] == ["students:*"]

    suspended = await client.post(f"{DELEGATED}/{grant['id']}/suspend", headers=headers)
    assert suspended.json()["status"] == "suspended"
    revoked = await client.post(f"{DELEGATED}/{grant['id']}/revoke", headers=headers)
    assert revoked.json()["status"] == "revoked"
    assert revoked.json()["revokedBy"] == admin.id

    deleted = await client.delete(f"{DELEGATED}/{grant['id']}", headers=headers)
    assert deleted.status_code == 204


@pytest.mark.asyncio
async def test_teacher_cannot_manage_grants(client, make_school, make_user):
    school = await make_school()
    teacher = await make_user(school_id=school.id)

    response = await client.get(DELEGATED, headers=tenant_headers(teacher, school.id))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_cannot_delegate_to_another_schools_member(client, make_school, make_user):
    school = await make_school()
    other = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)
    outsider = await make_user(school_id=other.id)

    response = await client.post(
        DELEGATED,
        json={"email": outsider.email, "userId": outsider.id, "permissions": ["students:read"]},
        headers=tenant_headers(admin, school.id),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_grants_of_other_schools_are_not_found(
    client, make_school, make_user, make_school_grant
):
    school = await make_school()
    other = await make_school()
    other_admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=other.id)
    member = await make_user(school_id=school.id)
    grant = await make_school_grant(member, school.id, ["students:read"])

    response = await client.get(
        f"{DELEGATED}/{grant.id}", headers=tenant_headers(other_admin, other.id)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delegated_school_admin_uses_grant(client, make_school, make_user, make_school_grant):
    school = await make_school()
    helper = await make_user(roles=[UserRole.DELEGATED_SCHOOL_ADMIN.value], school_id=school.id)
    await make_school_grant(helper, school.id, ["schools:read"])
    headers = tenant_headers(helper, school.id)

    assert (await client.get(f"{API}/school", headers=headers)).status_code == 200
    denied = await client.patch(f"{API}/school", json={"name": "X"}, headers=headers)
    assert denied.status_code == 403


@pytest.mark.asyncio
async def test_expired_school_grant_is_denied_and_reported(
    client, make_school, make_user, make_school_grant
):
    school = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)
    helper = await make_user(roles=[UserRole.DELEGATED_SCHOOL_ADMIN.value], school_id=school.id)
    grant = await make_school_grant(helper, school.id, ["schools:read"], expiry_date=past(minutes=1))

    denied = await client.get(f"{API}/school", headers=tenant_headers(helper, school.id))
    assert denied.status_code == 403

    status = await client.get(
        f"{DELEGATED}/{grant.id}/status", headers=tenant_headers(admin, school.id)
    )
    assert status.json() == {"id": grant.id, "status": "expired"}


@pytest.mark.asyncio
async def test_patching_end_time_keeps_expiry_date(client, make_school, make_user):
    school = await make_school()
    admin = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)
    member = await make_user(school_id=school.id)
    headers = tenant_headers(admin, school.id)
    end = future(days=3).date()

    created = await client.post(
        DELEGATED,
        json={
            "email": member.email,
            "userId": member.id,
            "permissions": ["students:read"],
            "endDate": end.isoformat(),
            "endTime": "17:30",
        },
        headers=headers,
    )
    patched = await client.patch(
        f"{DELEGATED}/{created.json()['id']}", json={"endTime": "18:00"}, headers=headers
    )

    assert patched.status_code == 200
    assert patched.json()["expiryDate"].startswith(f"{end.isoformat()}T18:00")
