"""Outcome of authenticating a request from its session cookies.

Authentication never raises: it yields either ``Authenticated`` or
``Anonymous``. Rejecting anonymous callers is left to the route guards.
"""

from dataclasses import dataclass

from academia.domain.entities.user import Principal


@dataclass(frozen=True)
class IssuedTokens:
    """A freshly minted access/refresh token pair."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class Authenticated:
    """The request carries a valid session.

    ``refreshed`` is set when the access token had to be renewed from the
    refresh token; the new pair must be written back as cookies.
    """

    principal: Principal
    refreshed: IssuedTokens | None = None


@dataclass(frozen=True)
class Anonymous:
    """No usable session. ``reason`` is for logging only."""

    reason: str = "no credentials"


AuthResult = Authenticated | Anonymous
