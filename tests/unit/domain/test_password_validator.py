"""Unit tests for the password strength validator."""

from academia.domain.services.password_validator import (
    PasswordValidator,
    default_password_validator,
)


def test_strong_password_passes():
    assert default_password_validator.validate("Password123!") == []
    assert default_password_validator.is_valid("Sup3r$ecret")


def test_every_failed_rule_is_reported():
    codes = {e.code for e in default_password_validator.validate("abc")}
    assert codes == {
        "password_too_short",
        "password_no_uppercase",
        "password_no_digit",
        "password_no_special",
    }


def test_rules_can_be_relaxed():
    validator = PasswordValidator(min_length=4, require_special=False, require_uppercase=False)
    assert validator.is_valid("abc1")
