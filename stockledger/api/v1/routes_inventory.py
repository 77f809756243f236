# stockledger/api/v1/routes_inventory.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession


from stockledger.db.base import get_db
from stockledger.domain.stock.schemas import (
    DeleteResult,
    InventoryItemOut,
    StockUpdate,
    StockUpdateOut,
    TransactionOut,
)
from stockledger.domain.stock.service import delete_item, get_item, list_pending_orders, update_stock


router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


@router.get("/{inventory_id}", response_model=InventoryItemOut)
async def get_item_endpoint(
    inventory_id: str,
    db: AsyncSession = Depends(get_db),
):
    item = await get_item(db, inventory_id)
    return item

@router.patch("/{inventory_id}/stock", response_model=StockUpdateOut)
async def update_stock_endpoint(
    inventory_id: str,
    payload: StockUpdate,
    db: AsyncSession = Depends(get_db),
):
    result = await update_stock(db, inventory_id, payload)
    return StockUpdateOut(
        item=InventoryItemOut.model_validate(result.item),
        transaction=TransactionOut.model_validate(result.transaction),
    )

@router.get("/{inventory_id}/pending-orders", response_model=List[TransactionOut])
async def list_pending_orders_endpoint(
    inventory_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await list_pending_orders(db, inventory_id)

@router.delete("/{inventory_id}", response_model=DeleteResult)
async def delete_item_endpoint(
    inventory_id: str,
    db: AsyncSession = Depends(get_db),
):
    # ledger entries are undone one by one before the item row goes
    await delete_item(db, inventory_id)
    return DeleteResult(message="Item and its transactions deleted")
