"""Integration tests for the authentication endpoints."""

from datetime import timedelta

import pytest

from academia.domain.entities import UserRole
from academia.infrastructure.auth.jwt_service import jwt_service
from conftest import API, PASSWORD, auth_cookies, set_cookie_values


async def _login(client, email, password=PASSWORD, path="/auth/login"):
    return await client.post(f"{API}{path}", json={"email": email, "password": password})


@pytest.mark.asyncio
async def test_login_sets_session_cookies(client, make_school, make_user):
    school = await make_school()
    user = await make_user(roles=[UserRole.SCHOOL_ADMIN.value], school_id=school.id)

    response = await _login(client, user.email)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == user.id
    assert body["user"]["role"] == "school-admin"
    assert body["user"]["schoolId"] == school.id
    assert body["expiresIn"] > 0

    cookies = set_cookie_values(response)
    assert {"accessToken", "refreshToken"} <= set(cookies)
    assert jwt_service.validate_access_token(cookies["accessToken"])["sub"] == user.id
    raw = " ".join(response.headers.get_list("set-cookie")).lower()
    assert "httponly" in raw
    assert "samesite=strict" in raw


@pytest.mark.asyncio
async def test_login_failure_envelope(client, make_user):
    user = await make_user()

    response = await _login(client, user.email, "wrong-password")

    assert response.status_code == 401
    body = response.json()
    assert body["statusCode"] == 401
    assert body["message"] == "Invalid credentials"
    assert body["path"] == f"{API}/auth/login"
    assert body["method"] == "POST"
    assert "timestamp" in body


@pytest.mark.asyncio
async def test_repeated_failures_lock_the_account(client, make_user):
    user = await make_user()

    for _ in range(5):
        assert (await _login(client, user.email, "wrong-password")).status_code == 401

    response = await _login(client, user.email)
    assert response.status_code == 423
    assert "locked" in response.json()["message"]


@pytest.mark.asyncio
async def test_invalid_login_body_is_400(client):
    response = await client.post(f"{API}/auth/login", json={"email": "not-an-email"})
    assert response.status_code == 400
    body = response.json()
    assert body["statusCode"] == 400
    assert {error["field"] for error in body["errors"]} >= {"email", "password"}


@pytest.mark.asyncio
async def test_super_admin_login_rejects_other_roles(client, make_user):
    teacher = await make_user()
    root = await make_user(roles=[UserRole.SUPER_ADMIN.value])

    denied = await _login(client, teacher.email, path="/auth/super-admin/login")
    allowed = await _login(client, root.email, path="/auth/super-admin/login")

    assert denied.status_code == 403
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_refresh_rotates_tokens(client, make_user):
    user = await make_user()
    login = await _login(client, user.email)
    old_refresh = set_cookie_values(login)["refreshToken"]
    client.cookies.clear()

    response = await client.post(
        f"{API}/auth/refresh", headers={"Cookie": f"refreshToken={old_refresh}"}
    )
    assert response.status_code == 200
    new_refresh = set_cookie_values(response)["refreshToken"]
    assert new_refresh != old_refresh

    replay = await client.post(
        f"{API}/auth/refresh", headers={"Cookie": f"refreshToken={old_refresh}"}
    )
    assert replay.status_code == 401
    assert replay.json()["message"] == "Invalid refresh token"


@pytest.mark.asyncio
async def test_refresh_without_cookie(client):
    response = await client.post(f"{API}/auth/refresh")
    assert response.status_code == 401
    assert response.json()["message"] == "Refresh token not found in cookies"


@pytest.mark.asyncio
async def test_expired_access_token_is_renewed_transparently(client, make_user):
    user = await make_user()
    login = await _login(client, user.email)
    refresh_token = set_cookie_values(login)["refreshToken"]
    client.cookies.clear()
    expired = jwt_service.create_access_token(
        user_id=user.id,
        email=user.email,
        roles=list(user.roles),
        expires_delta=timedelta(seconds=-5),
    )

    response = await client.get(
        f"{API}/auth/me",
        headers={"Cookie": f"accessToken={expired}; refreshToken={refresh_token}"},
    )

    assert response.status_code == 200
    assert response.json()["id"] == user.id
    renewed = set_cookie_values(response)
    assert renewed["refreshToken"] != refresh_token
    assert jwt_service.validate_access_token(renewed["accessToken"])["sub"] == user.id


@pytest.mark.asyncio
async def test_me_requires_authentication(client):
    response = await client.get(f"{API}/auth/me")
    assert response.status_code == 401
    assert response.json()["message"] == "Authentication required"


@pytest.mark.asyncio
async def test_me_accepts_bearer_token(client, make_user):
    user = await make_user()
    token = jwt_service.create_access_token(
        user_id=user.id, email=user.email, roles=list(user.roles)
    )
    response = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == user.email


@pytest.mark.asyncio
async def test_my_schools(client, make_school, make_user):
    school = await make_school(name="Home School")
    await make_school(name="Elsewhere")
    user = await make_user(school_id=school.id)

    response = await client.get(f"{API}/auth/me/schools", headers=auth_cookies(user))

    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [school.id]


@pytest.mark.asyncio
async def test_logout_clears_cookies_and_session(client, make_user, db_session):
    user = await make_user()
    await _login(client, user.email)
    client.cookies.clear()

    response = await client.post(f"{API}/auth/logout", headers=auth_cookies(user))

    assert response.status_code == 200
    cleared = set_cookie_values(response)
    assert cleared["accessToken"] == ""
    assert cleared["refreshToken"] == ""
    await db_session.refresh(user)
    assert user.refresh_token_hash is None


@pytest.mark.asyncio
async def test_change_password(client, make_user):
    user = await make_user()
    headers = auth_cookies(user)

    wrong = await client.post(
        f"{API}/auth/change-password",
        json={"currentPassword": "nope", "newPassword": "NewPassword456!"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    changed = await client.post(
        f"{API}/auth/change-password",
        json={"currentPassword": PASSWORD, "newPassword": "NewPassword456!"},
        headers=headers,
    )
    assert changed.status_code == 200

    client.cookies.clear()
    assert (await _login(client, user.email)).status_code == 401
    assert (await _login(client, user.email, "NewPassword456!")).status_code == 200
