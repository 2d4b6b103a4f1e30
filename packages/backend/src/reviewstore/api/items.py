"""Items API — the catalog, plus reviews attached to an item.

Learn: Reading is open to everyone; creating needs a bearer token.
- GET /items → all items, by title
- POST /items → create an item
- GET /items/:id → one item
- GET /items/:id/reviews → reviews of an item
- POST /items/:id/reviews → review an item as the caller
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.auth.dependencies import get_current_user
from reviewstore.db.engine import get_db
from reviewstore.db.models import User
from reviewstore.schemas.item import ItemCreate, ItemRead
from reviewstore.schemas.review import ReviewCreate, ReviewRead
from reviewstore.services.item_service import ItemService
from reviewstore.services.review_service import ReviewService

router = APIRouter(prefix="/items")


def _get_service(db: AsyncSession = Depends(get_db)) -> ItemService:
    return ItemService(db)


def _get_review_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.get("", response_model=list[ItemRead])
async def list_items(svc: ItemService = Depends(_get_service)):
    return await svc.list_items()


@router.post("", response_model=ItemRead, status_code=201)
async def create_item(
    body: ItemCreate,
    user: User = Depends(get_current_user),
    svc: ItemService = Depends(_get_service),
):
    return await svc.create_item(body.title, body.details)


@router.get("/{item_id}", response_model=ItemRead)
async def get_item(item_id: uuid.UUID, svc: ItemService = Depends(_get_service)):
    return await svc.get_item(item_id)


# ─── Reviews of an item ──────────────────────────────────


@router.get("/{item_id}/reviews", response_model=list[ReviewRead])
async def list_item_reviews(
    item_id: uuid.UUID,
    svc: ReviewService = Depends(_get_review_service),
):
    return await svc.list_item_reviews(item_id)


@router.post("/{item_id}/reviews", response_model=ReviewRead, status_code=201)
async def create_review(
    item_id: uuid.UUID,
    body: ReviewCreate,
    user: User = Depends(get_current_user),
    svc: ReviewService = Depends(_get_review_service),
):
    """Write a review of an item. The caller becomes its owner."""
    return await svc.create_review(
        item_id,
        owner_id=user.id,
        text=body.text,
        score=body.score,
    )
