"""Pydantic schemas for reviews and comments.

Learn: Create/update bodies never carry a user id. The owner always comes
from the resolved bearer token, so a client cannot write a review or
comment in someone else's name by putting an id in the JSON.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ─── Reviews ─────────────────────────────────────────────


class ReviewCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=255)
    score: int = Field(..., ge=1, le=5)


class ReviewUpdate(BaseModel):
    """Partial update — only non-None fields are applied."""
    text: Optional[str] = Field(None, min_length=1, max_length=255)
    score: Optional[int] = Field(None, ge=1, le=5)


class ReviewRead(BaseModel):
    id: uuid.UUID
    item_id: uuid.UUID
    user_id: uuid.UUID
    text: str
    score: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ─── Comments ────────────────────────────────────────────


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=255)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=255)


class CommentRead(BaseModel):
    id: uuid.UUID
    review_id: uuid.UUID
    user_id: uuid.UUID
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
