"""Password hashing utilities.

Learn: Uses bcrypt for password hashing. bcrypt salts every hash with fresh
random bytes and embeds algorithm, cost and salt in its output
("$2b$12$<22-char salt><31-char digest>"), so verify needs nothing but the
stored string. The work factor comes from settings (12 by default, roughly
100-250ms per hash).

Verification recomputes the digest with the stored salt and compares the
two strings with secrets.compare_digest, so the comparison takes the same
time wherever the first differing byte is.

Both functions are CPU-bound. Async callers should run them through
run_in_threadpool so one login does not stall other requests.
"""

import secrets

import bcrypt

from reviewstore.config import settings

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt and a fresh salt."""
    pw_bytes = password.encode("utf-8")
    if len(pw_bytes) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash.

    Returns False (never raises) for wrong passwords, oversized passwords,
    and hashes that are not valid bcrypt strings.
    """
    try:
        pw_bytes = password.encode("utf-8")
        hash_bytes = password_hash.encode("utf-8")
        if len(pw_bytes) > MAX_PASSWORD_BYTES:
            return False
        candidate = bcrypt.hashpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError, AttributeError):
        return False
    return secrets.compare_digest(candidate, hash_bytes)


# Verified against when a login names an unknown user, so that path costs
# as much as a wrong password for a real one.
_DUMMY_HASH: str | None = None


def dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password(secrets.token_urlsafe(16))
    return _DUMMY_HASH
