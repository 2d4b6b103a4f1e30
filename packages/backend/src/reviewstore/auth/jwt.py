"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries the user id in `sub`, a `type` marker and the issue time, signed
with HS256 and the process-wide secret.

The secret is handed to TokenSigner at construction instead of being read
from a global inside verify(). The app builds one signer from settings at
startup (get_token_signer); tests override that dependency to sign with a
different secret and watch verification fail.

Expiry is optional: with expires_minutes > 0 an `exp` claim is added and
PyJWT enforces it. Callers see the same issue()/verify() shape either way.
"""

import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

import jwt

from reviewstore.config import settings

TOKEN_TYPE = "access"


class InvalidTokenError(Exception):
    """Raised when a token cannot be verified, whatever the reason."""


class TokenSigner:
    """Issues and verifies signed access tokens with one fixed secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 0,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue(self, user_id: uuid.UUID | str) -> str:
        """Create a signed access token for a user id."""
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "type": TOKEN_TYPE,
            "iat": now,
        }
        if self.expires_minutes > 0:
            payload["exp"] = now + timedelta(minutes=self.expires_minutes)
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: Any) -> uuid.UUID:
        """Verify a token and return the user id it was issued for.

        Raises InvalidTokenError for every bad input: wrong signature or
        secret, malformed or non-string tokens, wrong token type, missing
        or non-UUID subject, or an expired `exp`.
        """
        if not isinstance(token, str) or not token:
            raise InvalidTokenError("Token is missing")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if payload.get("type") != TOKEN_TYPE:
            raise InvalidTokenError("Not an access token")
        try:
            return uuid.UUID(str(payload["sub"]))
        except (ValueError, TypeError, AttributeError) as e:
            raise InvalidTokenError("Invalid token subject") from e


@lru_cache
def get_token_signer() -> TokenSigner:
    """FastAPI dependency — the signer built from settings, created once."""
    return TokenSigner(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.access_token_expire_minutes,
    )
