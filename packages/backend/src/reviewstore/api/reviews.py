"""Reviews API.

Learn: Routes for a single review and its comments:
- GET /reviews/:id → read (open)
- PUT /reviews/:id → edit (author only)
- DELETE /reviews/:id → delete with its comments (author only)
- GET /reviews/:id/comments → list comments (open)
- POST /reviews/:id/comments → comment as the caller (once per review)

Ownership is checked in the services against the user resolved from the
token; unknown ids are 404 and someone else's review is 403.
"""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.auth.dependencies import get_current_user
from reviewstore.db.engine import get_db
from reviewstore.db.models import User
from reviewstore.schemas.review import (
    CommentCreate,
    CommentRead,
    ReviewRead,
    ReviewUpdate,
)
from reviewstore.services.comment_service import CommentService
from reviewstore.services.review_service import ReviewService

router = APIRouter(prefix="/reviews")


def _get_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def _get_comment_service(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)


@router.get("/{review_id}", response_model=ReviewRead)
async def get_review(review_id: uuid.UUID, svc: ReviewService = Depends(_get_service)):
    return await svc.get_review(review_id)


@router.put("/{review_id}", response_model=ReviewRead)
async def update_review(
    review_id: uuid.UUID,
    body: ReviewUpdate,
    user: User = Depends(get_current_user),
    svc: ReviewService = Depends(_get_service),
):
    return await svc.update_review(
        review_id,
        caller_id=user.id,
        text=body.text,
        score=body.score,
    )


@router.delete("/{review_id}", status_code=204)
async def delete_review(
    review_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: ReviewService = Depends(_get_service),
):
    await svc.delete_review(review_id, caller_id=user.id)
    return Response(status_code=204)


# ─── Comments on a review ────────────────────────────────


@router.get("/{review_id}/comments", response_model=list[CommentRead])
async def list_review_comments(
    review_id: uuid.UUID,
    svc: CommentService = Depends(_get_comment_service),
):
    return await svc.list_review_comments(review_id)


@router.post("/{review_id}/comments", response_model=CommentRead, status_code=201)
async def create_comment(
    review_id: uuid.UUID,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_get_comment_service),
):
    return await svc.create_comment(review_id, owner_id=user.id, content=body.content)
