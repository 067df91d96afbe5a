"""Session authentication from cookies.

``SessionAuthenticator.authenticate`` turns the access and refresh cookies
of a request into an ``AuthResult``. It never raises for bad credentials:
every failure becomes ``Anonymous`` with a reason for the logs, and
rejecting anonymous callers is left to the route guards.

States::

    no access token ──────────────────────────────► Anonymous
    access token valid ──► user active? ──────────► Authenticated
    access token invalid ─► refresh token present? ─► refresh ─► Authenticated(refreshed)
                                                               └► Anonymous
"""

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from academia.core.config import Settings, get_settings
from academia.core.logging import get_logger
from academia.domain.entities import (
    Anonymous,
    Authenticated,
    AuthResult,
    Principal,
    UserStatus,
)
from academia.infrastructure.auth.jwt_service import (
    JWTError,
    JWTService,
    jwt_service,
)
from academia.infrastructure.auth.password_hasher import verify_password
from academia.infrastructure.auth.session_tokens import (
    issue_session_tokens,
    refresh_token_expired,
)
from academia.infrastructure.persistence.models import UserModel
from academia.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

# Relative to the API prefix
AUTH_EXEMPT_PREFIXES = (
    "/auth/login",
    "/auth/register",
    "/auth/refresh",
    "/auth/password-reset",
    "/auth/forgot-password",
    "/auth/reset-password",
    "/auth/verify-email",
    "/auth/csrf-token",
    "/auth/super-admin/login",
)


def principal_from_user(user: UserModel) -> Principal:
    """Build a detached principal from a user row."""
    return Principal(
        id=user.id,
        email=user.email,
        roles=tuple(user.roles or ()),
        status=user.status,
        school_id=user.school_id,
    )


def is_auth_exempt(path: str, api_prefix: str = "") -> bool:
    """Check whether ``path`` is one of the endpoints that establish a session."""
    if api_prefix and path.startswith(api_prefix):
        path = path[len(api_prefix):]
    return path.startswith(AUTH_EXEMPT_PREFIXES)


class SessionAuthenticator:
    """Resolve a request's principal from its session tokens."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        tokens: JWTService = jwt_service,
    ) -> None:
        """Initialize the authenticator.

        Args:
            session: Database session used for user lookups and token rotation.
            settings: Application settings. Loaded if not provided.
            tokens: JWT service used to verify and mint tokens.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.tokens = tokens
        self.users = UserRepository(session)

    async def authenticate(
        self,
        path: str,
        access_token: str | None,
        refresh_token: str | None,
    ) -> AuthResult:
        """Authenticate a request.

        Args:
            path: Request path, used to skip the auth endpoints themselves.
            access_token: Value of the access cookie (or bearer token).
            refresh_token: Value of the refresh cookie.

        Returns:
            Authenticated or Anonymous.
        """
        if is_auth_exempt(path, self.settings.api_prefix):
            return Anonymous("auth endpoint")

        if not access_token:
            return Anonymous("no access token")

        try:
            payload = self.tokens.validate_access_token(access_token)
        except JWTError as e:
            if not refresh_token:
                return Anonymous(f"access token rejected: {e}")
            logger.debug("Access token rejected, attempting refresh", error=str(e))
            return await self.refresh(refresh_token)

        user = await self.users.get_by_id(payload["sub"])
        if user is None:
            return Anonymous("user not found")
        if user.status != UserStatus.ACTIVE.value:
            return Anonymous(f"user status is {user.status}")
        return Authenticated(principal_from_user(user))

    async def refresh(self, refresh_token: str) -> AuthResult:
        """Rotate the session from a refresh token.

        The token must verify, belong to an active user, match the stored
        hash and not be past the stored expiry. On success a new pair is
        minted and the stored hash replaced.
        """
        try:
            payload = self.tokens.validate_refresh_token(refresh_token)
        except JWTError as e:
            return Anonymous(f"refresh token rejected: {e}")

        user = await self.users.get_by_id(payload["sub"])
        if user is None:
            return Anonymous("user not found")
        if user.status != UserStatus.ACTIVE.value:
            return Anonymous(f"user status is {user.status}")
        if not verify_password(refresh_token, user.refresh_token_hash):
            return Anonymous("refresh token does not match stored hash")
        if refresh_token_expired(user.refresh_token_expires, datetime.now(timezone.utc)):
            return Anonymous("stored refresh token expired")

        issued = await issue_session_tokens(self.session, user, self.tokens)
        await self.session.commit()

        logger.info("Session refreshed", user_id=user.id)
        return Authenticated(principal_from_user(user), refreshed=issued)
