"""User repository for database operations."""

from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from academia.infrastructure.persistence.models import UserModel


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user.

        The email is normalized to lower case before insert.

        Args:
            user: User model to create.

        Returns:
            Created user model.
        """
        user.email = user.email.strip().lower()
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID (UUID string).

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by email, ignoring case.

        Args:
            email: User's email address.

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.session.execute(
            select(UserModel.id)
            .where(func.lower(UserModel.email) == email.strip().lower())
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def list_with_role(self, role: str) -> list[UserModel]:
        """List users holding ``role`` anywhere in their role list."""
        result = await self.session.execute(select(UserModel).order_by(UserModel.created_at))
        return [user for user in result.scalars().all() if role in (user.roles or [])]

    async def update_refresh_token(
        self,
        user_id: str,
        token_hash: str | None,
        expires_at: datetime | None,
    ) -> None:
        """Store (or clear) the hash of the user's current refresh token.

        Args:
            user_id: ID of the user to update.
            token_hash: Argon2 hash of the refresh token, or None to clear it.
            expires_at: Expiry of the refresh token, or None to clear it.
        """
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                refresh_token_hash=token_hash,
                refresh_token_expires=expires_at,
                updated_at=datetime.now(timezone.utc),
            )
        )
        await self.session.flush()

    async def record_failed_login(
        self, user_id: str, attempts: int, lockout_until: datetime | None
    ) -> None:
        """Persist the failed-attempt counter and lockout deadline."""
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                login_attempts=attempts,
                lockout_until=lockout_until,
                updated_at=datetime.now(timezone.utc),
            )
        )
        await self.session.flush()

    async def record_successful_login(self, user_id: str) -> None:
        """Reset lockout counters and stamp the login time."""
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                login_attempts=0,
                lockout_until=None,
                last_login_at=datetime.now(timezone.utc),
                updated_at=datetime.now(timezone.utc),
            )
        )
        await self.session.flush()

    async def update_password(self, user_id: str, password_hash: str) -> None:
        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
        )
        await self.session.flush()
