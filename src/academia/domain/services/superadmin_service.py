"""Service for creating super admin users.

Super admins hold the ``super-admin`` role, belong to no school and may
enter every school.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from academia.domain.entities import UserRole, UserStatus
from academia.domain.services.password_validator import default_password_validator
from academia.infrastructure.auth.password_hasher import hash_password


class SuperadminCreationError(Exception):
    """Raised when super admin creation fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SuperadminService:
    """Service for managing super admin users."""

    @staticmethod
    async def create_superadmin(
        email: str,
        password: str,
        session: AsyncSession,
    ) -> str:
        """Create a super admin user.

        Args:
            email: Email address for the super admin.
            password: Password for the super admin.
            session: Database session.

        Returns:
            ID of the created user.

        Raises:
            SuperadminCreationError: If creation fails due to validation or database errors.
        """
        from academia.infrastructure.persistence.models import UserModel
        from academia.infrastructure.persistence.repositories import UserRepository

        email = email.strip().lower()
        password_errors = default_password_validator.validate(password)
        if password_errors:
            error_messages = [f"{e.field}: {e.message}" for e in password_errors]
            raise SuperadminCreationError(
                f"Password validation failed: {'; '.join(error_messages)}"
            )

        user_repo = UserRepository(session)
        if await user_repo.email_exists(email):
            raise SuperadminCreationError(f"A user with email '{email}' already exists")

        user = UserModel(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            roles=[UserRole.SUPER_ADMIN.value],
            status=UserStatus.ACTIVE.value,
            is_email_verified=True,
            school_id=None,
        )

        try:
            await user_repo.create(user)
            await session.commit()
            return user.id
        except Exception as e:
            await session.rollback()
            raise SuperadminCreationError(f"Failed to create super admin user: {e}") from e

    @staticmethod
    async def has_superadmin(session: AsyncSession) -> bool:
        """Check if any super admin exists.

        Args:
            session: Database session.

        Returns:
            True if at least one super admin exists, False otherwise.
        """
        from academia.infrastructure.persistence.repositories import UserRepository

        users = await UserRepository(session).list_with_role(UserRole.SUPER_ADMIN.value)
        return bool(users)
