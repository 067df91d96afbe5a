"""Issuing and rotating session token pairs.

Only the Argon2 hash of a user's current refresh token is stored. Issuing a
new pair overwrites it, so the previous refresh token stops validating.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from academia.domain.entities import IssuedTokens
from academia.domain.services.effective_status import as_utc
from academia.infrastructure.auth.jwt_service import JWTService, jwt_service
from academia.infrastructure.auth.password_hasher import hash_password
from academia.infrastructure.persistence.models import UserModel
from academia.infrastructure.persistence.repositories import UserRepository


async def issue_session_tokens(
    session: AsyncSession,
    user: UserModel,
    tokens: JWTService = jwt_service,
) -> IssuedTokens:
    """Mint an access/refresh pair for ``user`` and store the refresh hash.

    Args:
        session: Database session. The caller commits.
        user: The user to issue tokens for.
        tokens: JWT service to sign with.

    Returns:
        The new token pair.
    """
    roles = list(user.roles or [])
    access_token = tokens.create_access_token(
        user_id=user.id,
        email=user.email,
        roles=roles,
        school_id=user.school_id,
    )
    refresh_token, expires_at = tokens.create_refresh_token(
        user_id=user.id,
        email=user.email,
        roles=roles,
        school_id=user.school_id,
    )
    await UserRepository(session).update_refresh_token(
        user.id, hash_password(refresh_token), expires_at
    )
    return IssuedTokens(access_token=access_token, refresh_token=refresh_token)


async def revoke_session_tokens(session: AsyncSession, user_id: str) -> None:
    """Forget the stored refresh token so no refresh can succeed."""
    await UserRepository(session).update_refresh_token(user_id, None, None)


def refresh_token_expired(expires_at: datetime | None, now: datetime) -> bool:
    """A missing expiry counts as expired."""
    expires_at = as_utc(expires_at)
    return expires_at is None or expires_at <= now
