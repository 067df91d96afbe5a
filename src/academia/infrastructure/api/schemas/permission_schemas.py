"""Permission catalog API schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from academia.infrastructure.api.schemas.common import CamelModel


class CreatePermissionRequest(CamelModel):
    """Request schema for adding a permission to the catalog.

    Attributes:
        name: Permission string in ``resource:action`` form.
        description: Optional description.
    """

    name: str = Field(..., max_length=100)
    description: str | None = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        """Validate that name is not empty."""
        if not v or not v.strip():
            raise ValueError("Permission name cannot be empty")
        return v.strip()


class UpdatePermissionRequest(CamelModel):
    """Request schema for updating a permission's description."""

    description: str | None = Field(None, max_length=255)


class PermissionResponse(CamelModel):
    """Response schema for a catalog permission."""

    id: int
    name: str
    resource: str
    action: str
    description: str | None = None
    created_at: datetime
