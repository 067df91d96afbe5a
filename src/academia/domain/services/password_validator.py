"""Password strength validation.

Applied when a super admin is created and when a user changes their
password. Each rule yields one error so callers can report every problem
at once.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PasswordValidationError:
    """A single failed password rule.

    Attributes:
        field: The field name (always 'password').
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


class PasswordValidator:
    """Validates password strength.

    Default policy: at least 8 characters with an uppercase letter, a
    lowercase letter, a digit and a special character.
    """

    SPECIAL_CHARS = r"!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>\/?`~"

    def __init__(
        self,
        min_length: int = 8,
        require_uppercase: bool = True,
        require_lowercase: bool = True,
        require_digit: bool = True,
        require_special: bool = True,
    ) -> None:
        self.min_length = min_length
        self._patterns: list[tuple[str, str, str]] = []
        if require_uppercase:
            self._patterns.append(("[A-Z]", "an uppercase letter", "password_no_uppercase"))
        if require_lowercase:
            self._patterns.append(("[a-z]", "a lowercase letter", "password_no_lowercase"))
        if require_digit:
            self._patterns.append((r"\d", "a digit", "password_no_digit"))
        if require_special:
            self._patterns.append(
                (f"[{self.SPECIAL_CHARS}]", "a special character", "password_no_special")
            )

    def validate(self, password: str) -> list[PasswordValidationError]:
        """Validate a password against the policy.

        Args:
            password: The password to validate.

        Returns:
            List of validation errors. Empty list if password is valid.
        """
        errors: list[PasswordValidationError] = []
        if len(password) < self.min_length:
            errors.append(
                PasswordValidationError(
                    field="password",
                    message=f"Password must be at least {self.min_length} characters",
                    code="password_too_short",
                )
            )
        for pattern, description, code in self._patterns:
            if not re.search(pattern, password):
                errors.append(
                    PasswordValidationError(
                        field="password",
                        message=f"Password must contain at least {description}",
                        code=code,
                    )
                )
        return errors

    def is_valid(self, password: str) -> bool:
        return not self.validate(password)


default_password_validator = PasswordValidator()
