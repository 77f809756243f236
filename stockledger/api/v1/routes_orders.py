# stockledger/api/v1/routes_orders.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession


from stockledger.db.base import get_db
from stockledger.domain.stock.schemas import OrderCreate, TransactionOut
from stockledger.domain.stock.service import place_order


router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
async def place_order_endpoint(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db),
):
    txn = await place_order(db, payload)
    return txn
