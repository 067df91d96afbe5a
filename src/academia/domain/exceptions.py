"""Exceptions raised by domain services.

Each exception carries the HTTP status code the API layer answers with, so
services stay free of web framework imports while the global exception
handler can still render them uniformly.
"""


class AcademiaError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AcademiaError):
    """Raised when input is well-formed but violates a business rule."""

    status_code = 400


class AuthenticationError(AcademiaError):
    """Raised when credentials are missing or wrong."""

    status_code = 401


class AccessDeniedError(AcademiaError):
    """Raised when the caller is known but not allowed."""

    status_code = 403


class NotFoundError(AcademiaError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ConflictError(AcademiaError):
    """Raised on uniqueness violations and invalid lifecycle transitions."""

    status_code = 409


class UnknownPermissionError(ValidationError):
    """Raised when a permission string is not in the catalog."""

    def __init__(self, permission: str) -> None:
        self.permission = permission
        super().__init__(f"Permission '{permission}' does not exist")


class AccountLockedError(AuthenticationError):
    """Raised when login is attempted on a locked-out account."""

    status_code = 423
