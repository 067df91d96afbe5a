"""School API schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from academia.infrastructure.api.schemas.common import CamelModel


class CreateSchoolRequest(CamelModel):
    """Request body for creating a school."""

    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=2, max_length=32, description="Unique school code")
    email: EmailStr | None = None
    address: str | None = Field(None, max_length=500)


class UpdateSchoolRequest(CamelModel):
    """Request body for updating a school. Omitted fields are unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    address: str | None = Field(None, max_length=500)
    status: str | None = None


class SchoolSummary(CamelModel):
    """Minimal school view."""

    id: str
    name: str
    code: str
    status: str


class SchoolResponse(SchoolSummary):
    """Full school record."""

    email: str | None = None
    address: str | None = None
    created_at: datetime
    updated_at: datetime


class SchoolContextResponse(CamelModel):
    """The school a tenant request resolved to and the caller's standing there."""

    school_id: str
    school: SchoolSummary
    user_role: str | None = None
    permissions: list[str]
    is_super_admin: bool
    is_school_admin: bool
