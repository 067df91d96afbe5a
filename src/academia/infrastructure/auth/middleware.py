"""Session authentication middleware.

Runs before every route. It authenticates the request from its session
cookies and stores the resulting ``AuthResult`` on ``request.state.auth``.
It never rejects a request: route dependencies decide whether an anonymous
caller gets a 401.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from academia.core.config import get_settings
from academia.core.logging import bind_user_id, get_logger
from academia.domain.entities import Anonymous, Authenticated, AuthResult
from academia.infrastructure.auth.authenticator import SessionAuthenticator
from academia.infrastructure.auth.cookies import set_session_cookies
from academia.infrastructure.persistence.database import get_db_manager

logger = get_logger(__name__)

HEALTH_PATHS = ("/health", "/ready", "/live")


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


class SessionAuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to authenticate ALL requests from their session cookies."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Authenticate the request and enrich request state.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint to call.

        Returns:
            The response from the application, carrying fresh session
            cookies when the access token was renewed.
        """
        request.state.auth = Anonymous()

        if request.url.path in HEALTH_PATHS:
            return await call_next(request)

        settings = get_settings()
        access_token = request.cookies.get(settings.access_cookie_name) or _bearer_token(request)
        refresh_token = request.cookies.get(settings.refresh_cookie_name)

        result: AuthResult
        try:
            async with get_db_manager().session() as session:
                result = await SessionAuthenticator(session, settings).authenticate(
                    request.url.path, access_token, refresh_token
                )
        except Exception as e:
            # Authentication must never break the request pipeline
            logger.error(
                "Unexpected error in SessionAuthenticationMiddleware",
                error=str(e),
                path=request.url.path,
            )
            result = Anonymous("authentication error")

        request.state.auth = result
        if isinstance(result, Authenticated):
            bind_user_id(result.principal.id)
        elif access_token or refresh_token:
            logger.debug(
                "Request continues unauthenticated",
                reason=result.reason,
                path=request.url.path,
            )

        response = await call_next(request)

        if isinstance(result, Authenticated) and result.refreshed is not None:
            set_session_cookies(response, result.refreshed, settings)
        return response
