import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    details: str = Field(..., min_length=1, max_length=255)


class ItemRead(BaseModel):
    id: uuid.UUID
    title: str
    details: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
