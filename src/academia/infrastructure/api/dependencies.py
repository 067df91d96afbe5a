"""FastAPI dependencies for authentication and authorization.

The session middleware has already authenticated the request by the time
these run; the dependencies here turn its ``AuthResult`` into 401s and 403s,
resolve the school a tenant request operates in, and check roles and
permissions.
"""

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academia.core.config import get_settings
from academia.core.logging import get_logger
from academia.domain.entities import (
    Anonymous,
    Principal,
    RequestContext,
    UserRole,
    role_satisfies,
)
from academia.domain.services.delegated_school_admin_service import (
    DelegatedSchoolAdminService,
)
from academia.domain.services.iam_service import IamService
from academia.domain.services.permission_matcher import school_permissions_cover
from academia.domain.services.school_context_service import SchoolContextService
from academia.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

SCHOOL_ID_HEADER = "x-school-id"

# Relative to the API prefix
SCHOOL_CONTEXT_EXEMPT_PREFIXES = ("/auth", "/super-admin", "/system", "/health", "/iam")
HEALTH_PATHS = ("/health", "/ready", "/live")

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_request_context(request: Request) -> RequestContext:
    """Return the request's typed context, creating it from the auth result."""
    context = getattr(request.state, "context", None)
    if isinstance(context, RequestContext):
        return context
    context = RequestContext(auth=getattr(request.state, "auth", Anonymous()))
    request.state.context = context
    return context


RequestCtx = Annotated[RequestContext, Depends(get_request_context)]


async def get_current_user(context: RequestCtx) -> Principal:
    """Return the authenticated principal.

    Raises:
        HTTPException: 401 if the request is not authenticated.
    """
    if context.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return context.user


# Type alias for dependency injection
AuthenticatedUser = Annotated[Principal, Depends(get_current_user)]


def _is_school_context_exempt(path: str) -> bool:
    if path in HEALTH_PATHS:
        return True
    prefix = get_settings().api_prefix
    if prefix and path.startswith(prefix):
        path = path[len(prefix):]
    return path.startswith(SCHOOL_CONTEXT_EXEMPT_PREFIXES)


def _first(values: Any, *keys: str) -> str | None:
    for key in keys:
        value = values.get(key)
        if value:
            return str(value)
    return None


async def _requested_school_id(request: Request) -> str | None:
    """Find the tenant a request targets.

    Priority: header, path parameter, JSON body, query string.
    """
    school_id = request.headers.get(SCHOOL_ID_HEADER)
    if school_id:
        return school_id

    school_id = _first(request.path_params, "school_id", "schoolId")
    if school_id:
        return school_id

    if "application/json" in request.headers.get("content-type", ""):
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            school_id = _first(body, "schoolId", "school_id")
            if school_id:
                return school_id

    return _first(request.query_params, "schoolId", "school_id")


async def require_school_context(
    request: Request,
    context: RequestCtx,
    session: DbSession,
) -> RequestContext:
    """Resolve and enforce the school a tenant request operates in.

    Attached to tenant routers. Anonymous requests pass through untouched;
    ``get_current_user`` rejects them afterwards.

    Raises:
        HTTPException: 400 without a school ID, 403 when the school cannot
            be resolved or the caller may not enter it.
    """
    if request.method == "OPTIONS" or _is_school_context_exempt(request.url.path):
        return context

    user = context.user
    if user is None or user.is_system:
        return context

    try:
        school_id = await _requested_school_id(request)
        if not school_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="School ID is required. Please provide x-school-id header",
            )

        service = SchoolContextService(session)
        school_context = await service.get_school_context(user.id, school_id)
        if school_context is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unable to resolve school context",
            )

        if not await service.validate_school_access(user.id, school_id):
            logger.warning(
                "School access denied",
                user_id=user.id,
                school_id=school_id,
                user_school_id=user.school_id,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied to this school",
            )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            "School context guard failed",
            error=str(e),
            user_id=user.id,
            path=request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Failed to verify school context",
        ) from e

    context = context.with_school(school_context)
    request.state.context = context
    request.state.school_context = school_context
    request.state.school_id = school_context.school_id
    return context


async def get_tenant_context(
    context: Annotated[RequestContext, Depends(require_school_context)],
    user: AuthenticatedUser,
) -> RequestContext:
    """Return the context of a tenant request, requiring a resolved school."""
    if context.school_context is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="School ID is required. Please provide x-school-id header",
        )
    return context


TenantContext = Annotated[RequestContext, Depends(get_tenant_context)]


def _insufficient_permissions(permissions: tuple[str, ...]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Insufficient permissions. Required: {', '.join(permissions)}",
    )


class RolesGuard:
    """Require one of the given roles, honouring the role hierarchy.

    A user passes when any role they hold equals or outranks any required
    role. Delegated roles only satisfy themselves.
    """

    def __init__(self, *roles: str | UserRole) -> None:
        self.roles = tuple(r.value if isinstance(r, UserRole) else r for r in roles)

    async def __call__(self, user: AuthenticatedUser) -> Principal:
        if not self.roles:
            return user
        if any(role_satisfies(held, required) for held in user.roles for required in self.roles):
            return user
        logger.info(
            "Role check failed",
            user_id=user.id,
            roles=list(user.roles),
            required=list(self.roles),
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")


class PermissionGuard:
    """Require platform-level permissions.

    Super admins always pass. Delegated super admins pass when their
    delegated account covers the required permissions: any one of them by
    default, all of them when ``permission_match_mode`` is ``all``.
    """

    def __init__(self, *permissions: str) -> None:
        self.permissions = permissions

    async def __call__(self, user: AuthenticatedUser, session: DbSession) -> Principal:
        if not self.permissions or user.is_super_admin:
            return user

        if user.has_role(UserRole.DELEGATED_SUPER_ADMIN):
            iam = IamService(session)
            results = [
                await iam.check_delegated_account_access(user.email, permission)
                for permission in self.permissions
            ]
            if get_settings().permission_match_mode == "all":
                allowed = all(results)
            else:
                allowed = any(results)
            if allowed:
                return user

        logger.info(
            "Permission check failed",
            user_id=user.id,
            required=list(self.permissions),
        )
        raise _insufficient_permissions(self.permissions)


class SchoolPermissionGuard:
    """Require permissions within the request's school.

    Checked in order: super admin, the permissions derived from the user's
    role for this school, then a delegated school admin grant.
    """

    def __init__(self, *permissions: str) -> None:
        self.permissions = permissions

    async def __call__(
        self,
        context: TenantContext,
        user: AuthenticatedUser,
        session: DbSession,
    ) -> RequestContext:
        school_context = context.school_context
        if not self.permissions or school_context.is_super_admin or user.is_super_admin:
            return context

        school_id = school_context.school_id
        if all(
            school_permissions_cover(school_context.permissions, permission, school_id)
            for permission in self.permissions
        ):
            return context

        if user.has_role(UserRole.DELEGATED_SCHOOL_ADMIN):
            service = DelegatedSchoolAdminService(session)
            results = [
                await service.check_delegated_school_admin_access(
                    user.email, school_id, permission
                )
                for permission in self.permissions
            ]
            if get_settings().permission_match_mode == "all":
                allowed = all(results)
            else:
                allowed = any(results)
            if allowed:
                return context

        logger.info(
            "School permission check failed",
            user_id=user.id,
            school_id=school_id,
            required=list(self.permissions),
        )
        raise _insufficient_permissions(self.permissions)


# Type alias for super admin-only routes
SuperAdminUser = Annotated[Principal, Depends(RolesGuard(UserRole.SUPER_ADMIN))]
