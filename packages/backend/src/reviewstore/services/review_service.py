"""Review service — scored reviews of items, editable only by their author.

Learn: Each review moves through

    NonExistent → Created(owner) → Updated(owner)* → Deleted

The owner is stamped from the resolved caller at creation and never
changes. Update and delete look the review up first (unknown id →
NotFoundError) and only then compare owners (mismatch → ForbiddenError),
so a missing review is never reported as forbidden. A rejected call leaves
the row untouched.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.db.models import Comment, Review
from reviewstore.errors import NotFoundError, ValidationFailedError
from reviewstore.services.ownership import ensure_owner

logger = structlog.get_logger()


class ReviewService:
    """Create, read, update and delete reviews."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create ───────────────────────────────────────────

    async def create_review(
        self,
        item_id: uuid.UUID,
        *,
        owner_id: uuid.UUID,
        text: str,
        score: int,
    ) -> Review:
        """Create a review of an item owned by owner_id.

        The item is not looked up; item_id is stored as given.
        """
        review = Review(item_id=item_id, user_id=owner_id, text=text, score=score)
        self.db.add(review)
        await self.db.commit()
        await self.db.refresh(review)
        logger.info(
            "review.created",
            review_id=str(review.id),
            item_id=str(item_id),
            user_id=str(owner_id),
        )
        return review

    # ─── Read ─────────────────────────────────────────────

    async def get_review(self, review_id: uuid.UUID) -> Review:
        review = await self.db.get(Review, review_id)
        if review is None:
            raise NotFoundError("Review not found")
        return review

    async def list_item_reviews(self, item_id: uuid.UUID) -> list[Review]:
        q = (
            select(Review)
            .where(Review.item_id == item_id)
            .order_by(Review.created_at, Review.id)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def list_user_reviews(self, user_id: uuid.UUID) -> list[Review]:
        q = (
            select(Review)
            .where(Review.user_id == user_id)
            .order_by(Review.created_at, Review.id)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    # ─── Update / delete (owner only) ─────────────────────

    async def update_review(
        self,
        review_id: uuid.UUID,
        *,
        caller_id: uuid.UUID,
        text: Optional[str] = None,
        score: Optional[int] = None,
    ) -> Review:
        if text is None and score is None:
            raise ValidationFailedError("Provide text or score to update")

        review = await self.get_review(review_id)
        ensure_owner(review.user_id, caller_id, resource="review", resource_id=review_id)

        if text is not None:
            review.text = text
        if score is not None:
            review.score = score
        await self.db.commit()
        await self.db.refresh(review)
        logger.info("review.updated", review_id=str(review_id))
        return review

    async def delete_review(self, review_id: uuid.UUID, *, caller_id: uuid.UUID) -> None:
        """Delete a review and the comments attached to it."""
        review = await self.get_review(review_id)
        ensure_owner(review.user_id, caller_id, resource="review", resource_id=review_id)

        await self.db.execute(delete(Comment).where(Comment.review_id == review_id))
        await self.db.delete(review)
        await self.db.commit()
        logger.info("review.deleted", review_id=str(review_id))
