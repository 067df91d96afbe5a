"""Role API schemas for request/response validation."""

from pydantic import Field, field_validator

from academia.infrastructure.api.schemas.common import CamelModel


class CreateRoleRequest(CamelModel):
    """Request schema for creating a role.

    Attributes:
        name: Role name (e.g., 'registrar').
        description: Optional description of the role's purpose.
        permissions: Catalog permission names bundled into the role.
    """

    name: str = Field(..., max_length=100)
    description: str | None = None
    permissions: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        """Validate that name is not empty."""
        if not v or not v.strip():
            raise ValueError("Role name cannot be empty")
        return v.strip()


class UpdateRoleRequest(CamelModel):
    """Request schema for updating a role. Omitted fields are unchanged."""

    name: str | None = Field(None, max_length=100)
    description: str | None = None
    permissions: list[str] | None = None


class RoleResponse(CamelModel):
    """Response schema for a role.

    Attributes:
        id: Role ID.
        name: Role name.
        description: Role description.
        permissions: Names of the permissions in the role.
    """

    id: int
    name: str
    description: str | None = None
    permissions: list[str] = Field(default_factory=list)

    @field_validator("permissions", mode="before")
    @classmethod
    def permission_names(cls, v: list) -> list[str]:
        return [getattr(p, "name", p) for p in v or []]
