"""JWT token service.

Provides JWT token creation and validation for session cookies. Access tokens
and refresh tokens carry the same identity claims and are told apart by the
``type`` claim.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from academia.core.config import get_settings


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTService:
    """Service for creating and validating JWT tokens.

    Token payload::

        {sub, email, role, roles, school_id?, type, iss, iat, exp, jti}
    """

    ALGORITHM = "HS256"
    ISSUER = "academia-pro"

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens. If not provided,
                        uses the configured secret key from settings.
        """
        self._secret_key = secret_key

    @property
    def secret_key(self) -> str:
        """Get the secret key for signing tokens."""
        if self._secret_key:
            return self._secret_key
        return get_settings().secret_key

    def _build_payload(
        self,
        token_type: str,
        user_id: str,
        email: str,
        roles: list[str],
        school_id: str | None,
        expires_delta: timedelta,
    ) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "iss": self.ISSUER,
            "sub": user_id,
            "iat": now,
            "exp": now + expires_delta,
            "jti": str(uuid.uuid4()),
            "email": email,
            "role": roles[0] if roles else None,
            "roles": list(roles),
            "type": token_type,
        }
        if school_id:
            payload["school_id"] = school_id
        return payload

    def create_access_token(
        self,
        user_id: str,
        email: str,
        roles: list[str],
        school_id: str | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an access token.

        Args:
            user_id: The user's unique identifier.
            email: The user's email address.
            roles: The user's roles, primary role first.
            school_id: The user's school, if any.
            expires_delta: Custom expiration time. Defaults to config value.

        Returns:
            Encoded JWT access token.
        """
        if expires_delta is None:
            expires_delta = timedelta(hours=get_settings().access_token_expire_hours)
        payload = self._build_payload(
            "access", user_id, email, roles, school_id, expires_delta
        )
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def create_refresh_token(
        self,
        user_id: str,
        email: str,
        roles: list[str],
        school_id: str | None = None,
        expires_delta: timedelta | None = None,
    ) -> tuple[str, datetime]:
        """Create a refresh token.

        Args:
            user_id: The user's unique identifier.
            email: The user's email address.
            roles: The user's roles, primary role first.
            school_id: The user's school, if any.
            expires_delta: Custom expiration time. Defaults to config value.

        Returns:
            Tuple of (encoded JWT refresh token, expiry timestamp for storage).
        """
        if expires_delta is None:
            expires_delta = timedelta(days=get_settings().refresh_token_expire_days)
        payload = self._build_payload(
            "refresh", user_id, email, roles, school_id, expires_delta
        )
        token = jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)
        return token, payload["exp"]

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token.

        Args:
            token: The encoded JWT token.

        Returns:
            Decoded token payload.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={"require": ["sub", "exp", "type"]},
            )
            return payload
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def validate_refresh_token(self, token: str) -> dict[str, Any]:
        """Validate that a token is a refresh token and decode it.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or not a refresh token.
        """
        payload = self.decode_token(token)
        if payload.get("type") != "refresh":
            raise InvalidTokenError("Not a refresh token")
        return payload

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate that a token is an access token and decode it.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or not an access token.
        """
        payload = self.decode_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenError("Not an access token")
        return payload

    def get_expires_in(self, expires_delta: timedelta | None = None) -> int:
        """Get the access token lifetime in seconds.

        Args:
            expires_delta: Custom expiration time. Defaults to config value.

        Returns:
            Expiration time in seconds.
        """
        if expires_delta is None:
            expires_delta = timedelta(hours=get_settings().access_token_expire_hours)
        return int(expires_delta.total_seconds())


# Default JWT service instance
jwt_service = JWTService()
