"""Item service — the catalog reviews point at.

Items are created by any authenticated user and read by anyone. They have
no owner and no update or delete path.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reviewstore.db.models import Item
from reviewstore.errors import DuplicateItemError, InternalError, NotFoundError

logger = structlog.get_logger()


class ItemService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_item(self, title: str, details: str) -> Item:
        item = Item(title=title, details=details)
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            existing = await self.db.execute(select(Item.id).where(Item.title == title))
            if existing.first() is not None:
                raise DuplicateItemError() from e
            logger.error("item.create_failed", error=str(e.orig))
            raise InternalError() from e
        await self.db.refresh(item)
        logger.info("item.created", item_id=str(item.id))
        return item

    async def get_item(self, item_id: uuid.UUID) -> Item:
        item = await self.db.get(Item, item_id)
        if item is None:
            raise NotFoundError("Item not found")
        return item

    async def list_items(self) -> list[Item]:
        result = await self.db.execute(select(Item).order_by(Item.title))
        return list(result.scalars().all())
