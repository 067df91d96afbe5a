"""Pydantic schemas for delegated grants.

Shared by the super admin delegated account endpoints and the tenant
delegated school admin endpoints.
"""

from datetime import date, datetime

from pydantic import EmailStr, Field, model_validator

from academia.domain.services.grant_lifecycle import GrantChanges, GrantDraft
from academia.infrastructure.api.schemas.common import CamelModel

END_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class CreateGrantRequest(CamelModel):
    """Request body for creating a delegated grant.

    Either ``userId`` or ``firstName`` and ``lastName`` must be given.
    """

    email: EmailStr
    permissions: list[str] = Field(..., min_length=1)
    user_id: str | None = None
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    middle_name: str | None = Field(None, max_length=100)
    start_date: datetime | None = None
    end_date: date | None = None
    end_time: str | None = Field(None, pattern=END_TIME_PATTERN)
    expiry_date: datetime | None = None
    notes: str | None = Field(None, max_length=1000)

    @model_validator(mode="after")
    def owner_given(self) -> "CreateGrantRequest":
        if not self.user_id and not (self.first_name and self.last_name):
            raise ValueError(
                "Either userId or user details (firstName, lastName) must be provided"
            )
        return self

    def to_draft(self) -> GrantDraft:
        return GrantDraft(
            email=str(self.email),
            permissions=self.permissions,
            user_id=self.user_id,
            first_name=self.first_name,
            last_name=self.last_name,
            middle_name=self.middle_name,
            start_date=self.start_date,
            end_date=self.end_date,
            end_time=self.end_time,
            expiry_date=self.expiry_date,
            notes=self.notes,
        )


class UpdateGrantRequest(CamelModel):
    """Request body for a partial grant update. Omitted fields are unchanged."""

    permissions: list[str] | None = Field(None, min_length=1)
    start_date: datetime | None = None
    end_date: date | None = None
    end_time: str | None = Field(None, pattern=END_TIME_PATTERN)
    expiry_date: datetime | None = None
    notes: str | None = Field(None, max_length=1000)

    def to_changes(self) -> GrantChanges:
        return GrantChanges(
            permissions=self.permissions,
            start_date=self.start_date,
            expiry_date=self.expiry_date,
            end_date=self.end_date,
            end_time=self.end_time,
            notes=self.notes,
            provided=set(self.model_fields_set),
        )


class DelegatedGrantResponse(CamelModel):
    """A delegated grant as stored."""

    id: str
    user_id: str
    email: str
    permissions: list[str]
    start_date: datetime | None = None
    expiry_date: datetime | None = None
    status: str
    notes: str | None = None
    created_by: str | None = None
    revoked_by: str | None = None
    revoked_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class DelegatedSchoolAdminResponse(DelegatedGrantResponse):
    """A delegated school admin grant, which also names its school."""

    school_id: str


class GrantStatusResponse(CamelModel):
    """Effective status of a grant right now."""

    id: str
    status: str
