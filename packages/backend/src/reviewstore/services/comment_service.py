"""Comment service — one comment per user per review.

Learn: The (user_id, review_id) pair is unique in the comments table, and
that constraint is the only guard. create_comment() does not check for an
existing comment before inserting. When two requests race, the database
accepts one and the other gets an IntegrityError, which is turned into
DuplicateCommentError. Because the error alone does not say which
constraint fired, the failed insert is followed by lookups to classify it.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.db.models import Comment, Review
from reviewstore.errors import DuplicateCommentError, InternalError, NotFoundError
from reviewstore.services.ownership import ensure_owner

logger = structlog.get_logger()


class CommentService:
    """Create, read, update and delete comments on reviews."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_comment(
        self,
        review_id: uuid.UUID,
        *,
        owner_id: uuid.UUID,
        content: str,
    ) -> Comment:
        if await self.db.get(Review, review_id) is None:
            raise NotFoundError("Review not found")

        comment = Comment(review_id=review_id, user_id=owner_id, content=content)
        self.db.add(comment)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise await self._classify_insert_failure(review_id, owner_id, e) from e

        await self.db.refresh(comment)
        logger.info(
            "comment.created",
            comment_id=str(comment.id),
            review_id=str(review_id),
            user_id=str(owner_id),
        )
        return comment

    async def _classify_insert_failure(
        self, review_id: uuid.UUID, owner_id: uuid.UUID, error: IntegrityError
    ) -> Exception:
        q = select(Comment.id).where(
            Comment.review_id == review_id, Comment.user_id == owner_id
        )
        if (await self.db.execute(q)).first() is not None:
            logger.info("comment.duplicate", review_id=str(review_id), user_id=str(owner_id))
            return DuplicateCommentError()
        # Review deleted between the existence check and the insert.
        if await self.db.get(Review, review_id) is None:
            return NotFoundError("Review not found")
        logger.error("comment.create_failed", error=str(error.orig))
        return InternalError()

    async def get_comment(self, comment_id: uuid.UUID) -> Comment:
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def list_review_comments(self, review_id: uuid.UUID) -> list[Comment]:
        if await self.db.get(Review, review_id) is None:
            raise NotFoundError("Review not found")
        q = (
            select(Comment)
            .where(Comment.review_id == review_id)
            .order_by(Comment.created_at, Comment.id)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def list_user_comments(self, user_id: uuid.UUID) -> list[Comment]:
        q = (
            select(Comment)
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at, Comment.id)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def update_comment(
        self, comment_id: uuid.UUID, *, caller_id: uuid.UUID, content: str
    ) -> Comment:
        comment = await self.get_comment(comment_id)
        ensure_owner(comment.user_id, caller_id, resource="comment", resource_id=comment_id)

        comment.content = content
        await self.db.commit()
        await self.db.refresh(comment)
        logger.info("comment.updated", comment_id=str(comment_id))
        return comment

    async def delete_comment(self, comment_id: uuid.UUID, *, caller_id: uuid.UUID) -> None:
        comment = await self.get_comment(comment_id)
        ensure_owner(comment.user_id, caller_id, resource="comment", resource_id=comment_id)

        await self.db.delete(comment)
        await self.db.commit()
        logger.info("comment.deleted", comment_id=str(comment_id))
