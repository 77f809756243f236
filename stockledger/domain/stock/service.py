# stockledger/domain/stock/service.py
"""Stock reconciliation: the only code path that changes stock_on_hand.

Every operation validates its request and resolves the referenced rows
before touching the session, then applies the item write and the ledger
write in one unit of work so a transactional backend commits them together.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stockledger.core.errors import InvalidInputError, NotFoundError, StoreError
from stockledger.core.identifiers import coerce_id
from stockledger.core.quantities import (
    ZERO,
    add_quantities,
    is_missing,
    parse_quantity,
    subtract_quantities,
    to_decimal_or_zero,
)
from stockledger.db.models.inventory import InventoryItem
from stockledger.db.models.transactions import Transaction, TransactionStatus
from stockledger.db.repositories import inventory as item_store
from stockledger.db.repositories import transactions as ledger_store
from .schemas import OrderCreate, StockUpdate

logger = logging.getLogger(__name__)


class StockUpdateResult(NamedTuple):
    item: InventoryItem
    transaction: Transaction


@asynccontextmanager
async def _unit_of_work(db: AsyncSession, action: str):
    try:
        yield
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Failed to %s", action, exc_info=True)
        raise StoreError(f"Failed to {action}") from exc
    except StoreError:
        await db.rollback()
        raise


def _current_stock(item: InventoryItem) -> Decimal:
    return to_decimal_or_zero(item.stock_on_hand)


def _ledger_order_key(txn: Transaction):
    # newest first: timestamp, then id so equal timestamps order deterministically
    return (txn.timestamp, txn.id)


async def _require_item(db: AsyncSession, inventory_id: Any) -> InventoryItem:
    # an id that is not a UUID cannot name a stored item
    key = coerce_id(inventory_id)
    item = None if key is None else await item_store.get_item(db, key)
    if item is None:
        raise NotFoundError("Item not found")
    return item


async def _require_transaction(db: AsyncSession, transaction_id: Any) -> Transaction:
    key = coerce_id(transaction_id)
    txn = None if key is None else await ledger_store.get_transaction_by_id(db, key)
    if txn is None:
        raise NotFoundError("Transaction not found")
    return txn


async def get_item(
    db: AsyncSession,
    inventory_id: Any
) -> InventoryItem:
    return await _require_item(db, inventory_id)


async def get_ledger_entry(
    db: AsyncSession,
    transaction_id: Any
) -> Transaction:
    return await _require_transaction(db, transaction_id)


async def list_ledger_entries(
    db: AsyncSession,
    inventory_id: Optional[Any] = None,
    status: Optional[TransactionStatus] = None,
) -> List[Transaction]:
    """Ledger entries, newest first. Read only.

    An inventory_id that is not a UUID matches no entries.
    """
    key = None
    if inventory_id is not None:
        key = coerce_id(inventory_id)
        if key is None:
            return []
    transactions = await ledger_store.list_transactions(db, inventory_id=key, status=status)
    return sorted(transactions, key=_ledger_order_key, reverse=True)


async def list_pending_orders(
    db: AsyncSession,
    inventory_id: Any
) -> List[Transaction]:
    item = await _require_item(db, inventory_id)
    return await list_ledger_entries(db, inventory_id=item.id, status=TransactionStatus.PENDING)


async def place_order(
    db: AsyncSession,
    data: OrderCreate
) -> Transaction:
    if is_missing(data.inventory_id):
        raise InvalidInputError("Missing required field: inventory_id", field="inventory_id")
    ordered_qty = parse_quantity(
        data.ordered_quantity,
        "ordered_quantity",
        "Ordered quantity must be a positive number",
    )
    if ordered_qty <= ZERO:
        raise InvalidInputError("Ordered quantity must be a positive number", field="ordered_quantity")

    item = await _require_item(db, data.inventory_id)
    current_stock = _current_stock(item)

    txn = Transaction(
        id=uuid.uuid4(),
        inventory_id=item.id,
        timestamp=datetime.now(timezone.utc),
        ordered_quantity=ordered_qty,
        actual_received=ZERO,
        previous_stock=current_stock,
        new_stock=current_stock,
        consumption="0",
        status=TransactionStatus.PENDING,
        notes=data.notes or "",
        employee_name=data.employee_name or "",
    )

    async with _unit_of_work(db, "create order"):
        ledger_store.put_transaction(db, txn)

    logger.info("Placed order %s for item %s: ordered=%s", txn.id, item.id, ordered_qty)
    return txn


def _parse_stock_request(data: StockUpdate):
    """Return (is_direct_set, quantity) for a validated stock request."""
    if data.new_stock is not None:
        target = parse_quantity(data.new_stock, "new_stock", "New stock must be a valid non-negative number")
        if target < ZERO:
            raise InvalidInputError("New stock must be a valid non-negative number", field="new_stock")
        return True, target

    if data.actual_received is None:
        raise InvalidInputError(
            "Missing required field: actual_received or new_stock",
            field="actual_received",
        )
    received = parse_quantity(data.actual_received, "actual_received", "Quantity must be a valid number")
    if received < ZERO:
        raise InvalidInputError("Quantity cannot be negative", field="actual_received")
    return False, received


async def update_stock(
    db: AsyncSession,
    inventory_id: Any,
    data: StockUpdate,
) -> StockUpdateResult:
    """Receive stock or set it directly, and record why in the ledger.

    Receiving against a pending order completes that order's entry in place;
    anything else appends a new completed entry. A direct set records the
    signed difference as the received quantity.
    """
    is_direct_set, quantity = _parse_stock_request(data)

    item = await _require_item(db, inventory_id)
    previous_stock = _current_stock(item)

    if is_direct_set:
        new_stock = quantity
        received_qty = subtract_quantities(new_stock, previous_stock, "new_stock")
    else:
        received_qty = quantity
        new_stock = add_quantities(previous_stock, received_qty, "actual_received")

    pending_txn = None
    if not is_direct_set and data.pending_order_id is not None:
        pending_key = coerce_id(data.pending_order_id)
        if pending_key is not None:
            pending_txn = await ledger_store.get_transaction_by_id(db, pending_key)
        if (
            pending_txn is None
            or pending_txn.inventory_id != item.id
            or pending_txn.status != TransactionStatus.PENDING
        ):
            logger.warning(
                "No pending order %s for item %s, recording receipt as a new entry",
                data.pending_order_id,
                inventory_id,
            )
            pending_txn = None

    async with _unit_of_work(db, "update stock"):
        item.stock_on_hand = new_stock
        item_store.put_item(db, item)

        if pending_txn is not None:
            txn = pending_txn
            txn.actual_received = received_qty
            txn.previous_stock = previous_stock
            txn.new_stock = new_stock
            txn.consumption = txn.consumption or "0"
            txn.status = TransactionStatus.COMPLETED
            txn.notes = data.notes or txn.notes or ""
            txn.employee_name = data.employee_name or txn.employee_name or ""
        else:
            txn = Transaction(
                id=uuid.uuid4(),
                inventory_id=item.id,
                timestamp=datetime.now(timezone.utc),
                ordered_quantity=received_qty,
                actual_received=received_qty,
                previous_stock=previous_stock,
                new_stock=new_stock,
                consumption="0",
                status=TransactionStatus.COMPLETED,
                notes=data.notes or "",
                employee_name=data.employee_name or "",
            )
        ledger_store.put_transaction(db, txn)

    if pending_txn is not None:
        logger.info(
            "Fulfilled order %s for item %s: received=%s stock %s -> %s",
            txn.id, item.id, received_qty, previous_stock, new_stock,
        )
    else:
        logger.info(
            "%s item %s: delta=%s stock %s -> %s (entry %s)",
            "Set stock of" if is_direct_set else "Received into",
            item.id, received_qty, previous_stock, new_stock, txn.id,
        )
    return StockUpdateResult(item=item, transaction=txn)


async def _remove_transaction(
    db: AsyncSession,
    txn: Transaction
) -> Optional[Decimal]:
    """Delete one entry and, if it was completed, recompute its item's stock.

    The recomputed stock is the new_stock of the latest remaining completed
    entry, or the deleted entry's own previous_stock when none remains. This
    trusts stored snapshots rather than replaying deltas.
    """
    await ledger_store.delete_transaction(db, txn)
    if txn.status != TransactionStatus.COMPLETED:
        return None

    item = await item_store.get_item(db, txn.inventory_id)
    if item is None:
        return None

    remaining = await ledger_store.list_transactions(
        db, inventory_id=txn.inventory_id, status=TransactionStatus.COMPLETED
    )
    remaining = [t for t in remaining if t.id != txn.id]
    if remaining:
        latest = max(remaining, key=_ledger_order_key)
        restored = latest.new_stock
    else:
        restored = txn.previous_stock

    item.stock_on_hand = restored
    item_store.put_item(db, item)
    return restored


async def delete_ledger_entry(
    db: AsyncSession,
    transaction_id: Any
) -> Transaction:
    """Undo a ledger entry. Returns the deleted entry."""
    txn = await _require_transaction(db, transaction_id)

    async with _unit_of_work(db, "delete transaction"):
        restored = await _remove_transaction(db, txn)

    if restored is None:
        logger.info("Deleted %s entry %s for item %s", txn.status.value, txn.id, txn.inventory_id)
    else:
        logger.info("Deleted entry %s, item %s stock recomputed to %s", txn.id, txn.inventory_id, restored)
    return txn


async def delete_item(
    db: AsyncSession,
    inventory_id: Any
) -> None:
    """Delete an item after undoing every ledger entry that references it."""
    item = await _require_item(db, inventory_id)
    transactions = await list_ledger_entries(db, inventory_id=item.id)

    async with _unit_of_work(db, "delete item"):
        for txn in transactions:
            await _remove_transaction(db, txn)
        # entries must be gone before the row they reference
        await db.flush()
        await item_store.delete_item(db, item)

    logger.info("Deleted item %s and %d ledger entries", item.id, len(transactions))
