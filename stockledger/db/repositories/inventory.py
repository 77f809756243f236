# stockledger/db/repositories/inventory.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from stockledger.core.errors import StoreError
from stockledger.db.models.inventory import InventoryItem

logger = logging.getLogger(__name__)


async def get_item(
    db: AsyncSession,
    inventory_id: UUID
) -> Optional[InventoryItem]:
    try:
        result = await db.execute(
            select(InventoryItem).where(InventoryItem.id == inventory_id)
        )
    except SQLAlchemyError as exc:
        logger.error("Failed to load inventory item %s", inventory_id, exc_info=True)
        raise StoreError("Failed to load inventory item") from exc
    item = result.scalar_one_or_none()
    return item

def put_item(
    db: AsyncSession,
    item: InventoryItem
) -> InventoryItem:
    # insert or update; the write reaches the store on the next flush/commit
    db.add(item)
    return item

async def delete_item(
    db: AsyncSession,
    item: InventoryItem
) -> None:
    await db.delete(item)
