"""Identity resolution and the FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to turn the
Authorization header into a live User row.

    header → bearer_token() → TokenSigner.verify() → UserService.find_by_id()

`get_current_user_optional` runs that chain and returns None when no header
is sent. `get_current_user` sits on top of it and also refuses the None.

A missing header, a non-Bearer scheme, a forged, tampered or expired token
and a token for a user that no longer exists all end the same way:
UnauthenticatedError with one fixed message. The client cannot tell which
check failed; the reason is only logged.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.auth.jwt import InvalidTokenError, TokenSigner, get_token_signer
from reviewstore.db.engine import get_db
from reviewstore.db.models import User
from reviewstore.errors import UnauthenticatedError
from reviewstore.services.user_service import UserService

logger = structlog.get_logger()


class IdentityResolver:
    """Maps a bearer token to the user it was issued for."""

    def __init__(self, db: AsyncSession, signer: TokenSigner):
        self.users = UserService(db)
        self.signer = signer

    async def resolve(self, token: Optional[str]) -> User:
        try:
            user_id = self.signer.verify(token)
        except InvalidTokenError as e:
            logger.info("auth.token_rejected", reason=str(e))
            raise UnauthenticatedError() from e

        user = await self.users.find_by_id(user_id)
        if user is None:
            logger.info("auth.unknown_subject", user_id=str(user_id))
            raise UnauthenticatedError()
        return user


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Pull the token out of `Authorization: Bearer <token>`.

    Returns None when the header is absent. A header with any other shape
    is rejected outright.
    """
    if authorization is None:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthenticatedError()
    return token


def get_identity_resolver(
    db: AsyncSession = Depends(get_db),
    signer: TokenSigner = Depends(get_token_signer),
) -> IdentityResolver:
    return IdentityResolver(db, signer)


async def get_current_user_optional(
    token: Optional[str] = Depends(bearer_token),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Optional[User]:
    """Soft auth: None without a header, the user with a valid one."""
    if token is None:
        return None
    return await resolver.resolve(token)


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Hard auth: 401 unless a valid token for an existing user is sent.

    Learn: Built on the soft dependency. A bad token has already been
    rejected there; all that is left to refuse here is a missing header.
    """
    if user is None:
        logger.info("auth.missing_credentials")
        raise UnauthenticatedError()
    return user

