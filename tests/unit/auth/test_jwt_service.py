"""Tests for JWT session tokens."""

from datetime import timedelta

import jwt
import pytest

from academia.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTService,
    TokenExpiredError,
)


@pytest.fixture
def tokens() -> JWTService:
    return JWTService(secret_key="test-secret")


def test_access_token_claims(tokens):
    token = tokens.create_access_token(
        user_id="u1", email="a@example.com", roles=["school-admin", "teacher"], school_id="s1"
    )

    payload = tokens.validate_access_token(token)

    assert payload["sub"] == "u1"
    assert payload["email"] == "a@example.com"
    assert payload["role"] == "school-admin"
    assert payload["roles"] == ["school-admin", "teacher"]
    assert payload["school_id"] == "s1"
    assert payload["type"] == "access"
    assert payload["iss"] == "academia-pro"


def test_school_id_omitted_when_absent(tokens):
    token = tokens.create_access_token(user_id="u1", email="a@example.com", roles=["super-admin"])
    assert "school_id" not in tokens.validate_access_token(token)


def test_refresh_token_returns_expiry(tokens):
    token, expires_at = tokens.create_refresh_token(
        user_id="u1", email="a@example.com", roles=[], expires_delta=timedelta(days=1)
    )
    payload = tokens.validate_refresh_token(token)
    assert payload["type"] == "refresh"
    assert int(expires_at.timestamp()) == payload["exp"]


def test_token_types_are_not_interchangeable(tokens):
    access = tokens.create_access_token(user_id="u1", email="a@example.com", roles=[])
    refresh, _ = tokens.create_refresh_token(user_id="u1", email="a@example.com", roles=[])

    with pytest.raises(InvalidTokenError):
        tokens.validate_refresh_token(access)
    with pytest.raises(InvalidTokenError):
        tokens.validate_access_token(refresh)


def test_expired_token(tokens):
    token = tokens.create_access_token(
        user_id="u1", email="a@example.com", roles=[], expires_delta=timedelta(seconds=-5)
    )
    with pytest.raises(TokenExpiredError):
        tokens.validate_access_token(token)


def test_wrong_secret_and_garbage_are_invalid(tokens):
    token = JWTService(secret_key="other-secret").create_access_token(
        user_id="u1", email="a@example.com", roles=[]
    )
    with pytest.raises(InvalidTokenError):
        tokens.validate_access_token(token)
    with pytest.raises(InvalidTokenError):
        tokens.decode_token("not-a-jwt")


def test_foreign_issuer_is_invalid(tokens):
    token = jwt.encode(
        {"sub": "u1", "type": "access", "exp": 4102444800, "iss": "someone-else"},
        "test-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        tokens.validate_access_token(token)
