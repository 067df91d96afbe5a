"""SQLAlchemy model for the users table.

Users are identified globally by email. A user may be affiliated with one
school (tenant); super admins usually are not.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from academia.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key (UUID string).
        email: Lower-cased email address, unique across the platform.
        password_hash: Argon2 hash. Null for accounts that cannot use password login.
        roles: Role names, primary role first.
        status: active, inactive, suspended or pending.
        school_id: Affiliated school, if any.
        refresh_token_hash: Argon2 hash of the current refresh token.
        refresh_token_expires: When the current refresh token stops being accepted.
        login_attempts: Consecutive failed password logins.
        lockout_until: Password login is refused until this time.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="User ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address (stored lower-case)",
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Argon2 password hash, null for delegated accounts",
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    roles: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Role names, primary role first",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        index=True,
        comment="active, inactive, suspended or pending",
    )
    school_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Affiliated school",
    )
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    refresh_token_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Argon2 hash of the current refresh token",
    )
    refresh_token_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    login_attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Consecutive failed password logins",
    )
    lockout_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    @property
    def role(self) -> str | None:
        """Primary role."""
        return self.roles[0] if self.roles else None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, roles={self.roles})>"
