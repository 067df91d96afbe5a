"""Secret hashing using Argon2.

Used for user passwords and for the stored hash of each user's current
refresh token. Verification is constant-time.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password (or any secret) using Argon2id.

    Example:
        >>> hashed = hash_password("SecureP@ss123!")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    """Verify a secret against a hash.

    A missing or malformed hash never verifies.

    Example:
        >>> hashed = hash_password("SecureP@ss123!")
        >>> verify_password("SecureP@ss123!", hashed)
        True
        >>> verify_password("wrong", hashed)
        False
    """
    if not hashed:
        return False
    try:
        return _hasher.verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a hash was made with outdated parameters."""
    return _hasher.check_needs_rehash(hashed)


# Precomputed hash verified against when a login names an unknown user, so
# the response time doesn't reveal whether the email exists.
DUMMY_PASSWORD_HASH = hash_password("academia-dummy-password")
