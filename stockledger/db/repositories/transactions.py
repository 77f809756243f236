
from typing import List, Optional
from uuid import UUID

import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import select

from stockledger.core.errors import StoreError
from stockledger.db.models.transactions import Transaction, TransactionStatus

logger = logging.getLogger(__name__)

async def get_transaction_by_id(
    db: AsyncSession,
    transaction_id: UUID
) -> Optional[Transaction]:
    try:
        result = await db.execute(
            select(Transaction).where(Transaction.id == transaction_id)
        )
    except SQLAlchemyError as exc:
        logger.error("Failed to load transaction %s", transaction_id, exc_info=True)
        raise StoreError("Failed to load transaction") from exc
    txn = result.scalar_one_or_none()
    return txn

async def list_transactions(
    db: AsyncSession,
    inventory_id: Optional[UUID] = None,
    status: Optional[TransactionStatus] = None,
) -> List[Transaction]:
    """Return matching ledger entries in no particular order."""
    stmt = select(Transaction)
    if inventory_id is not None:
        stmt = stmt.where(Transaction.inventory_id == inventory_id)
    if status is not None:
        stmt = stmt.where(Transaction.status == status)
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as exc:
        logger.error("Failed to list transactions for %s", inventory_id, exc_info=True)
        raise StoreError("Failed to list transactions") from exc
    transactions = result.scalars().all()
    return list(transactions)

def put_transaction(
    db: AsyncSession,
    txn: Transaction
) -> Transaction:
    db.add(txn)
    return txn

async def delete_transaction(
    db: AsyncSession,
    txn: Transaction
) -> None:
    await db.delete(txn)
