"""Password login, logout and password changes.

Failed password logins are counted per user. Reaching the configured limit
locks password login until the lockout period ends; a successful login
resets the counter.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from academia.core.config import Settings, get_settings
from academia.core.logging import get_logger
from academia.domain.entities import IssuedTokens, UserRole, UserStatus
from academia.domain.exceptions import (
    AccessDeniedError,
    AccountLockedError,
    AuthenticationError,
    ValidationError,
)
from academia.domain.services.effective_status import as_utc
from academia.domain.services.password_validator import default_password_validator
from academia.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    needs_rehash,
    verify_password,
)
from academia.infrastructure.auth.session_tokens import (
    issue_session_tokens,
    revoke_session_tokens,
)
from academia.infrastructure.persistence.models import UserModel
from academia.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Service for credential-based authentication."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize the auth service.

        Args:
            session: SQLAlchemy async session.
            settings: Application settings. Loaded if not provided.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.users = UserRepository(session)

    async def login(
        self,
        email: str,
        password: str,
        require_super_admin: bool = False,
    ) -> tuple[UserModel, IssuedTokens]:
        """Verify a password login and open a session.

        Args:
            email: Email address, any case.
            password: Plaintext password.
            require_super_admin: Reject users who are not super admins.

        Returns:
            Tuple of (user, issued session tokens).

        Raises:
            AuthenticationError: On unknown email, wrong password, an account
                without a password, or an inactive/unverified account.
            AccountLockedError: While a lockout is in effect.
            AccessDeniedError: If ``require_super_admin`` and the user is not one.
        """
        user = await self.users.get_by_email(email)
        if user is None or not user.password_hash:
            # Keep timing close to a real verification
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed: unknown user or no password", email=email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        now = datetime.now(timezone.utc)
        lockout_until = as_utc(user.lockout_until)
        if lockout_until is not None and lockout_until > now:
            logger.warning("Login refused: account locked", user_id=user.id)
            raise AccountLockedError(
                "Account is temporarily locked due to too many failed login attempts"
            )

        if user.status != UserStatus.ACTIVE.value:
            raise AuthenticationError("Account is not active")
        if not user.is_email_verified:
            raise AuthenticationError("Please verify your email before logging in")

        if not verify_password(password, user.password_hash):
            await self._record_failure(user, now)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if require_super_admin and UserRole.SUPER_ADMIN.value not in (user.roles or []):
            logger.warning("Super admin login refused for non super admin", user_id=user.id)
            raise AccessDeniedError("Super admin access required")

        if needs_rehash(user.password_hash):
            await self.users.update_password(user.id, hash_password(password))

        await self.users.record_successful_login(user.id)
        tokens = await issue_session_tokens(self.session, user)
        await self.session.commit()

        logger.info("User logged in", user_id=user.id, role=user.role)
        return user, tokens

    async def _record_failure(self, user: UserModel, now: datetime) -> None:
        attempts = (user.login_attempts or 0) + 1
        lockout_until = None
        if attempts >= self.settings.max_login_attempts:
            lockout_until = now + timedelta(minutes=self.settings.lockout_minutes)
        await self.users.record_failed_login(user.id, attempts, lockout_until)
        await self.session.commit()
        logger.info(
            "Login failed: wrong password",
            user_id=user.id,
            attempts=attempts,
            locked=lockout_until is not None,
        )

    async def logout(self, user_id: str) -> None:
        """End the user's session by forgetting the stored refresh token."""
        await revoke_session_tokens(self.session, user_id)
        await self.session.commit()
        logger.info("User logged out", user_id=user_id)

    async def change_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> None:
        """Change a user's password after checking the current one.

        Existing sessions are ended, so the user must log in again.

        Raises:
            AuthenticationError: If the user does not exist.
            ValidationError: If the current password is wrong or the new one
                is too weak.
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise AuthenticationError("User not found")
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        errors = default_password_validator.validate(new_password)
        if errors:
            raise ValidationError("; ".join(e.message for e in errors))

        await self.users.update_password(user_id, hash_password(new_password))
        await revoke_session_tokens(self.session, user_id)
        await self.session.commit()
        logger.info("Password changed", user_id=user_id)
