# stockledger/api/v1/routes_transactions.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession


from stockledger.db.base import get_db
from stockledger.db.models.transactions import TransactionStatus
from stockledger.domain.stock.schemas import DeleteResult, TransactionOut
from stockledger.domain.stock.service import delete_ledger_entry, get_ledger_entry, list_ledger_entries


router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionOut])
async def list_transactions_endpoint(
    inventory_id: Optional[str] = None,
    status: Optional[TransactionStatus] = None,
    db: AsyncSession = Depends(get_db),
):
    return await list_ledger_entries(db, inventory_id=inventory_id, status=status)

@router.get("/{transaction_id}", response_model=TransactionOut)
async def get_transaction_endpoint(
    transaction_id: str,
    db: AsyncSession = Depends(get_db),
):
    txn = await get_ledger_entry(db, transaction_id)
    return txn

@router.delete("/{transaction_id}", response_model=DeleteResult)
async def delete_transaction_endpoint(
    transaction_id: str,
    db: AsyncSession = Depends(get_db),
):
    txn = await delete_ledger_entry(db, transaction_id)
    if txn.status == TransactionStatus.COMPLETED:
        return DeleteResult(message="Transaction deleted and stock reverted")
    return DeleteResult(message="Transaction deleted")
