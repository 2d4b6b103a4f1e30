"""Service-layer tests — driving the services directly, without HTTP.

Learn: The API tests prove the wiring; these pin the contracts the routes
rely on: which error class each failure raises, that lookups come before
owner checks, and that a session stays usable after a rejected insert.
"""

import asyncio
import os
import uuid

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from reviewstore.auth.dependencies import (
    IdentityResolver,
    bearer_token,
    get_current_user,
    get_current_user_optional,
)
from reviewstore.auth.jwt import TokenSigner
from reviewstore.db.engine import build_engine, create_all
from reviewstore.db.models import Comment, User
from reviewstore.errors import (
    ConflictError,
    DuplicateCommentError,
    DuplicateUsernameError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from reviewstore.services.comment_service import CommentService
from reviewstore.services.item_service import ItemService
from reviewstore.services.ownership import ensure_owner
from reviewstore.services.review_service import ReviewService
from reviewstore.services.user_service import UserService

TEST_DB_URL = os.environ.get("REVIEWSTORE_TEST_DATABASE_URL", "sqlite+aiosqlite://")
IS_SQLITE = make_url(TEST_DB_URL).get_backend_name() == "sqlite"

OTHER_SECRET = "other-secret-9876543210-zyxwvutsrqponmlkjihgfedcba"


@pytest_asyncio.fixture()
async def race_session_factory(session_factory, tmp_path):
    """Sessions whose connections really run side by side.

    The shared in-memory SQLite engine funnels every session through one
    connection, so on SQLite the races run against a file database with a
    normal pool instead.
    """
    if not IS_SQLITE:
        yield session_factory
        return

    race_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    await create_all(race_engine)
    try:
        yield async_sessionmaker(race_engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await race_engine.dispose()


async def _users(db_session, *names):
    svc = UserService(db_session)
    return [await svc.register(n, "pw1") for n in names]


# ═══════════════════════════════════════════════════════════
# Users / credentials
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_duplicate_username_is_a_conflict(db_session):
    svc = UserService(db_session)
    first = await svc.register("alice", "pw1")
    first_id = first.id

    with pytest.raises(DuplicateUsernameError) as exc:
        await svc.register("alice", "pw2")
    assert isinstance(exc.value, ConflictError)
    assert exc.value.http_status == 409

    # The session was rolled back and is still usable.
    found = await svc.find_by_username("alice")
    assert found.id == first_id


@pytest.mark.asyncio
async def test_authenticate(db_session):
    svc = UserService(db_session)
    alice = await svc.register("alice", "pw1")

    assert (await svc.authenticate("alice", "pw1")).id == alice.id
    with pytest.raises(UnauthenticatedError):
        await svc.authenticate("alice", "pw2")
    with pytest.raises(UnauthenticatedError):
        await svc.authenticate("nobody", "pw1")


@pytest.mark.asyncio
async def test_find_missing_user(db_session):
    svc = UserService(db_session)
    assert await svc.find_by_username("ghost") is None
    assert await svc.find_by_id(uuid.uuid4()) is None


# ═══════════════════════════════════════════════════════════
# Identity resolution
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_identity_resolver(db_session, signer):
    (alice,) = await _users(db_session, "alice")
    resolver = IdentityResolver(db_session, signer)

    assert (await resolver.resolve(signer.issue(alice.id))).id == alice.id

    bad_tokens = [
        None,
        "",
        "garbage",
        TokenSigner(OTHER_SECRET).issue(alice.id),
        signer.issue(uuid.uuid4()),
    ]
    for token in bad_tokens:
        with pytest.raises(UnauthenticatedError):
            await resolver.resolve(token)


@pytest.mark.parametrize(
    "header, expected",
    [(None, None), ("Bearer abc", "abc"), ("bearer  abc ", "abc"), ("BEARER abc", "abc")],
)
def test_bearer_token_extraction(header, expected):
    assert bearer_token(header) == expected


@pytest.mark.parametrize("header", ["", "Bearer", "Bearer   ", "Basic abc", "abc", "Token abc"])
def test_bearer_token_rejects_other_shapes(header):
    with pytest.raises(UnauthenticatedError):
        bearer_token(header)


@pytest.mark.asyncio
async def test_optional_identity(db_session, signer):
    (alice,) = await _users(db_session, "alice")
    resolver = IdentityResolver(db_session, signer)

    assert await get_current_user_optional(None, resolver) is None
    user = await get_current_user_optional(signer.issue(alice.id), resolver)
    assert user.id == alice.id
    with pytest.raises(UnauthenticatedError):
        await get_current_user_optional("forged", resolver)


@pytest.mark.asyncio
async def test_required_identity_builds_on_optional(db_session, signer):
    (alice,) = await _users(db_session, "alice")
    resolver = IdentityResolver(db_session, signer)

    user = await get_current_user_optional(signer.issue(alice.id), resolver)
    assert await get_current_user(user) is user
    with pytest.raises(UnauthenticatedError):
        await get_current_user(None)


# ═══════════════════════════════════════════════════════════
# Ownership
# ═══════════════════════════════════════════════════════════


def test_ensure_owner():
    owner = uuid.uuid4()
    ensure_owner(owner, owner, resource="review", resource_id=uuid.uuid4())
    with pytest.raises(ForbiddenError):
        ensure_owner(owner, uuid.uuid4(), resource="review", resource_id=uuid.uuid4())


@pytest.mark.asyncio
async def test_missing_review_is_not_found_before_forbidden(db_session):
    (bob,) = await _users(db_session, "bob")
    svc = ReviewService(db_session)

    with pytest.raises(NotFoundError):
        await svc.update_review(uuid.uuid4(), caller_id=bob.id, score=2)
    with pytest.raises(NotFoundError):
        await svc.delete_review(uuid.uuid4(), caller_id=bob.id)


@pytest.mark.asyncio
async def test_review_update_rules(db_session):
    alice, bob = await _users(db_session, "alice", "bob")
    item = await ItemService(db_session).create_item("Book", "x")
    svc = ReviewService(db_session)
    review = await svc.create_review(item.id, owner_id=alice.id, text="ok", score=3)

    with pytest.raises(ValidationFailedError):
        await svc.update_review(review.id, caller_id=alice.id)
    with pytest.raises(ForbiddenError):
        await svc.update_review(review.id, caller_id=bob.id, text="mine now")

    updated = await svc.update_review(review.id, caller_id=alice.id, text="revised")
    assert updated.text == "revised"
    assert updated.score == 3
    assert updated.user_id == alice.id


@pytest.mark.asyncio
async def test_review_for_unlisted_item_is_stored(db_session):
    """item_id is kept as given; there is no catalog lookup."""
    (alice,) = await _users(db_session, "alice")
    svc = ReviewService(db_session)
    item_id = uuid.uuid4()

    review = await svc.create_review(item_id, owner_id=alice.id, text="ok", score=1)
    assert [r.id for r in await svc.list_item_reviews(item_id)] == [review.id]


# ═══════════════════════════════════════════════════════════
# Comments
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_duplicate_comment_then_session_still_usable(db_session):
    alice, bob = await _users(db_session, "alice", "bob")
    review = await ReviewService(db_session).create_review(
        uuid.uuid4(), owner_id=alice.id, text="ok", score=3
    )
    svc = CommentService(db_session)
    # A rollback expires loaded rows, so keep plain ids.
    review_id, bob_id = review.id, bob.id

    await svc.create_comment(review_id, owner_id=bob_id, content="first")
    with pytest.raises(DuplicateCommentError):
        await svc.create_comment(review_id, owner_id=bob_id, content="second")

    comments = await svc.list_review_comments(review_id)
    assert [c.content for c in comments] == ["first"]
    assert [c.content for c in await svc.list_user_comments(bob_id)] == ["first"]


@pytest.mark.asyncio
async def test_comment_needs_review(db_session):
    (alice,) = await _users(db_session, "alice")
    with pytest.raises(NotFoundError):
        await CommentService(db_session).create_comment(
            uuid.uuid4(), owner_id=alice.id, content="orphan"
        )


@pytest.mark.asyncio
async def test_comment_owner_checks(db_session):
    alice, bob = await _users(db_session, "alice", "bob")
    review = await ReviewService(db_session).create_review(
        uuid.uuid4(), owner_id=alice.id, text="ok", score=3
    )
    svc = CommentService(db_session)
    comment = await svc.create_comment(review.id, owner_id=alice.id, content="hi")

    with pytest.raises(ForbiddenError):
        await svc.update_comment(comment.id, caller_id=bob.id, content="x")
    with pytest.raises(ForbiddenError):
        await svc.delete_comment(comment.id, caller_id=bob.id)

    await svc.delete_comment(comment.id, caller_id=alice.id)
    with pytest.raises(NotFoundError):
        await svc.get_comment(comment.id)


@pytest.mark.asyncio
async def test_concurrent_duplicate_comments_store_one(race_session_factory):
    async with race_session_factory() as setup:
        alice, bob = await _users(setup, "alice", "bob")
        review = await ReviewService(setup).create_review(
            uuid.uuid4(), owner_id=alice.id, text="ok", score=3
        )

    async def attempt(content):
        async with race_session_factory() as session:
            try:
                await CommentService(session).create_comment(
                    review.id, owner_id=bob.id, content=content
                )
                return "created"
            except DuplicateCommentError:
                return "duplicate"

    results = await asyncio.gather(*(attempt(f"c{i}") for i in range(5)))
    assert results.count("created") == 1
    assert results.count("duplicate") == 4

    async with race_session_factory() as session:
        q = select(func.count()).select_from(Comment).where(Comment.review_id == review.id)
        assert (await session.execute(q)).scalar_one() == 1


@pytest.mark.asyncio
async def test_concurrent_registrations_store_one(race_session_factory):
    async def attempt():
        async with race_session_factory() as session:
            try:
                await UserService(session).register("alice", "pw1")
                return "created"
            except DuplicateUsernameError:
                return "duplicate"

    results = await asyncio.gather(*(attempt() for _ in range(5)))
    assert results.count("created") == 1

    async with race_session_factory() as session:
        q = select(func.count()).select_from(User).where(User.username == "alice")
        assert (await session.execute(q)).scalar_one() == 1
