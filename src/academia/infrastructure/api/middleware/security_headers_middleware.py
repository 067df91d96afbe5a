"""Response hardening headers for the access service."""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from academia.core.config import Settings, get_settings


def security_headers(settings: Settings) -> dict[str, str]:
    """Headers stamped on every response. HSTS is only sent in production."""
    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Content-Security-Policy": settings.csp_policy,
        "Permissions-Policy": settings.permissions_policy,
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }
    if settings.is_production:
        headers["Strict-Transport-Security"] = (
            f"max-age={settings.hsts_max_age}; includeSubDomains"
        )
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds ``security_headers`` to API responses unless disabled in settings."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        settings = get_settings()
        response = await call_next(request)
        if settings.security_headers_enabled:
            response.headers.update(security_headers(settings))
        return response
