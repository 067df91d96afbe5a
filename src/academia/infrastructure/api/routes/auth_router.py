"""Authentication API routes.

Provides endpoints for login, session refresh, logout and the current
user's profile. Session tokens travel as httpOnly cookies.
"""

from fastapi import APIRouter, Request, Response, status

from academia.core.config import get_settings
from academia.core.logging import get_logger
from academia.domain.entities import Authenticated
from academia.domain.exceptions import AuthenticationError, NotFoundError
from academia.domain.services.auth_service import AuthService
from academia.domain.services.school_context_service import SchoolContextService
from academia.infrastructure.api.dependencies import AuthenticatedUser, DbSession
from academia.infrastructure.api.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshResponse,
    SchoolSummary,
    UserProfileResponse,
)
from academia.infrastructure.auth import jwt_service
from academia.infrastructure.auth.authenticator import SessionAuthenticator
from academia.infrastructure.auth.cookies import clear_session_cookies, set_session_cookies
from academia.infrastructure.persistence.models import UserModel
from academia.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

router = APIRouter()


def _profile(user: UserModel) -> UserProfileResponse:
    return UserProfileResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        roles=list(user.roles or []),
        status=user.status,
        school_id=user.school_id,
    )


async def _login(
    login_request: LoginRequest,
    response: Response,
    session: DbSession,
    require_super_admin: bool,
) -> LoginResponse:
    service = AuthService(session)
    user, tokens = await service.login(
        str(login_request.email),
        login_request.password,
        require_super_admin=require_super_admin,
    )
    set_session_cookies(response, tokens)
    return LoginResponse(user=_profile(user), expires_in=jwt_service.get_expires_in())


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials"},
        423: {"description": "Account temporarily locked"},
    },
)
async def login(
    login_request: LoginRequest,
    response: Response,
    session: DbSession,
) -> LoginResponse:
    """Authenticate with email and password.

    Sets the access and refresh cookies on success. Repeated failures lock
    password login for the configured lockout period.
    """
    return await _login(login_request, response, session, require_super_admin=False)


@router.post(
    "/super-admin/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Not a super admin"},
        423: {"description": "Account temporarily locked"},
    },
)
async def super_admin_login(
    login_request: LoginRequest,
    response: Response,
    session: DbSession,
) -> LoginResponse:
    """Authenticate a super admin with email and password."""
    return await _login(login_request, response, session, require_super_admin=True)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={401: {"description": "Invalid refresh token"}},
)
async def refresh(
    request: Request,
    response: Response,
    session: DbSession,
) -> RefreshResponse:
    """Rotate the session using the refresh cookie."""
    settings = get_settings()
    refresh_token = request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        raise AuthenticationError("Refresh token not found in cookies")

    result = await SessionAuthenticator(session, settings).refresh(refresh_token)
    if not isinstance(result, Authenticated) or result.refreshed is None:
        logger.info("Token refresh failed", reason=getattr(result, "reason", None))
        raise AuthenticationError("Invalid refresh token")

    set_session_cookies(response, result.refreshed, settings)
    return RefreshResponse(expires_in=jwt_service.get_expires_in())


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: AuthenticatedUser,
    response: Response,
    session: DbSession,
) -> MessageResponse:
    """End the current session and clear the session cookies."""
    await AuthService(session).logout(current_user.id)
    clear_session_cookies(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserProfileResponse)
async def me(current_user: AuthenticatedUser, session: DbSession) -> UserProfileResponse:
    """Return the authenticated user's profile."""
    user = await UserRepository(session).get_by_id(current_user.id)
    if user is None:
        raise NotFoundError("User not found")
    return _profile(user)


@router.get("/me/schools", response_model=list[SchoolSummary])
async def my_schools(
    current_user: AuthenticatedUser, session: DbSession
) -> list[SchoolSummary]:
    """List the schools the authenticated user can enter."""
    schools = await SchoolContextService(session).get_accessible_schools(current_user.id)
    return [SchoolSummary.model_validate(school) for school in schools]


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={400: {"description": "Wrong current password or weak new password"}},
)
async def change_password(
    body: ChangePasswordRequest,
    current_user: AuthenticatedUser,
    response: Response,
    session: DbSession,
) -> MessageResponse:
    """Change the current user's password and end the current session."""
    await AuthService(session).change_password(
        current_user.id, body.current_password, body.new_password
    )
    clear_session_cookies(response)
    return MessageResponse(message="Password changed successfully")
