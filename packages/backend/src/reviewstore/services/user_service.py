"""User service — credential storage, registration and login.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database.

The users table enforces unique usernames. register() does not look the
name up first: it inserts and lets the constraint decide, so two concurrent
registrations of the same name cannot both succeed. The IntegrityError is
translated into DuplicateUsernameError.

Password hashes are only read inside this module. Nothing it returns to the
API is serialized with the hash (see schemas.user.UserRead).
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from reviewstore.auth.password import dummy_hash, hash_password, verify_password
from reviewstore.db.models import User
from reviewstore.errors import DuplicateUsernameError, InternalError, UnauthenticatedError

logger = structlog.get_logger()


class UserService:
    """Business logic for accounts and credentials."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Credential store ───────────────────────────────

    async def create(self, username: str, password_hash: str) -> User:
        """Insert a user row. Raises DuplicateUsernameError if the name is taken."""
        user = User(username=username, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if await self.find_by_username(username) is not None:
                raise DuplicateUsernameError() from e
            logger.error("user.create_failed", error=str(e.orig))
            raise InternalError() from e
        await self.db.refresh(user)
        return user

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    # ─── Registration / login ───────────────────────────

    async def register(self, username: str, password: str) -> User:
        """Hash the password off the event loop and store the new user."""
        password_hash = await run_in_threadpool(hash_password, password)
        user = await self.create(username, password_hash)
        logger.info("user.registered", user_id=str(user.id))
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """Return the user for a correct username/password pair.

        Unknown usernames and wrong passwords both raise
        UnauthenticatedError, and both pay for one bcrypt verification.
        """
        user = await self.find_by_username(username)
        stored_hash = user.password_hash if user else await run_in_threadpool(dummy_hash)
        matches = await run_in_threadpool(verify_password, password, stored_hash)

        if user is None or not matches:
            logger.info("user.login_failed")
            raise UnauthenticatedError()

        logger.info("user.logged_in", user_id=str(user.id))
        return user
