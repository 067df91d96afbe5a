"""Session cookie helpers."""

from starlette.responses import Response

from academia.core.config import Settings, get_settings
from academia.domain.entities import IssuedTokens


def set_session_cookies(
    response: Response,
    tokens: IssuedTokens,
    settings: Settings | None = None,
) -> None:
    """Write the access and refresh cookies onto ``response``.

    Both cookies are httpOnly and ``SameSite=Strict``; they are marked
    ``Secure`` in production. The refresh cookie outlives the access cookie.
    """
    settings = settings or get_settings()
    common = {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "strict",
        "path": "/",
    }
    response.set_cookie(
        settings.access_cookie_name,
        tokens.access_token,
        max_age=settings.access_token_max_age,
        **common,
    )
    response.set_cookie(
        settings.refresh_cookie_name,
        tokens.refresh_token,
        max_age=settings.refresh_token_max_age,
        **common,
    )


def clear_session_cookies(response: Response, settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(
            name,
            path="/",
            secure=settings.is_production,
            httponly=True,
            samesite="strict",
        )
