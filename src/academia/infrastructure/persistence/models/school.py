"""SQLAlchemy model for the schools table.

A school is a tenant: all domain data is scoped by its ID.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from academia.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SchoolModel(Base):
    """SQLAlchemy model for the schools table.

    Attributes:
        id: Primary key (UUID string).
        name: Display name.
        code: Short unique code.
        status: active, inactive or suspended.
    """

    __tablename__ = "schools"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="School ID (UUID)",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        index=True,
        comment="Short unique school code",
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        index=True,
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
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

    def __repr__(self) -> str:
        return f"<School(id={self.id}, code={self.code})>"
