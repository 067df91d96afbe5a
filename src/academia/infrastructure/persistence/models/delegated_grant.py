"""SQLAlchemy models for delegated permission grants.

A DelegatedAccount lets a principal act across all schools with a subset of
super admin permissions. A DelegatedSchoolAdmin does the same within a single
school. Both share the column layout defined by DelegatedGrantMixin.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from academia.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DelegatedGrantMixin:
    """Columns shared by both delegated grant tables.

    Attributes:
        id: Primary key (UUID string).
        user_id: User the grant belongs to.
        email: Copy of the user's email at grant time, unique per table.
        permissions: Permission strings (``resource:action``, wildcards allowed).
        start_date: Grant is not usable before this time, if set.
        expiry_date: Grant stops being usable after this time, if set.
        status: Stored lifecycle status.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )
    permissions: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Granted permission strings",
    )
    start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    expiry_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Null means the grant never expires",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    revoked_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    revoked_at: Mapped[datetime | None] = mapped_column(
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


class DelegatedAccountModel(DelegatedGrantMixin, Base):
    """Cross-school delegated grant issued by a super admin."""

    __tablename__ = "delegated_accounts"

    def __repr__(self) -> str:
        return f"<DelegatedAccount(id={self.id}, email={self.email}, status={self.status})>"


class DelegatedSchoolAdminModel(DelegatedGrantMixin, Base):
    """Single-school delegated grant."""

    __tablename__ = "delegated_school_admins"

    school_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return (
            f"<DelegatedSchoolAdmin(id={self.id}, school_id={self.school_id}, "
            f"email={self.email}, status={self.status})>"
        )
