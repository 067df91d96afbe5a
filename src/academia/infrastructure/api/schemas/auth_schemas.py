"""Pydantic schemas for authentication endpoints."""

from pydantic import EmailStr, Field

from academia.infrastructure.api.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Request body for password login."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class UserProfileResponse(CamelModel):
    """The authenticated user as returned by login and /me."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    first_name: str | None = Field(None, description="Given name")
    last_name: str | None = Field(None, description="Family name")
    role: str | None = Field(None, description="Primary role")
    roles: list[str] = Field(default_factory=list, description="All roles held")
    status: str = Field(..., description="Account status")
    school_id: str | None = Field(None, description="School the user belongs to")


class LoginResponse(CamelModel):
    """Response for a successful login. Tokens are set as cookies."""

    user: UserProfileResponse
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class RefreshResponse(CamelModel):
    """Response for a successful session refresh."""

    message: str = "Token refreshed successfully"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class ChangePasswordRequest(CamelModel):
    """Request body for changing the current user's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
