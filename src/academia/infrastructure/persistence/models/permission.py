"""SQLAlchemy model for the permissions catalog.

Every permission string written into a delegated grant must exist here.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academia.infrastructure.persistence.database import Base


class PermissionModel(Base):
    """SQLAlchemy model for the permissions table.

    Attributes:
        id: Auto-incrementing primary key.
        name: Unique ``resource:action`` string.
        resource: Resource segment of the name.
        action: Action segment of the name.
        description: Optional human readable description.
    """

    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Permission string (resource:action)",
    )
    resource: Mapped[str] = mapped_column(String(50), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    roles: Mapped[list["RoleModel"]] = relationship(  # noqa: F821
        "RoleModel",
        secondary="role_permissions",
        back_populates="permissions",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, name={self.name})>"
