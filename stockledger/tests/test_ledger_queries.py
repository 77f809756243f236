from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from stockledger.core.errors import NotFoundError
from stockledger.db.models.transactions import Transaction, TransactionStatus
from stockledger.domain.stock import service as stock_service
from stockledger.domain.stock.schemas import OrderCreate, StockUpdate


def _entry(inventory_id, timestamp, status=TransactionStatus.COMPLETED, stock="1"):
    return Transaction(
        inventory_id=inventory_id,
        timestamp=timestamp,
        ordered_quantity=Decimal("1"),
        actual_received=Decimal("1") if status == TransactionStatus.COMPLETED else Decimal("0"),
        previous_stock=Decimal(stock),
        new_stock=Decimal(stock),
        status=status,
    )


async def test_entries_are_listed_newest_first(db_session, make_item):
    item = await make_item()
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    middle = _entry(item.id, base + timedelta(days=1))
    oldest = _entry(item.id, base)
    newest = _entry(item.id, base + timedelta(days=2), status=TransactionStatus.PENDING)
    db_session.add_all([middle, oldest, newest])
    await db_session.commit()

    entries = await stock_service.list_ledger_entries(db_session, inventory_id=item.id)

    assert [e.id for e in entries] == [newest.id, middle.id, oldest.id]


async def test_listing_is_a_pure_read(db_session, make_item):
    item = await make_item(stock="2")
    await stock_service.update_stock(db_session, item.id, StockUpdate(actual_received="1"))
    await stock_service.place_order(db_session, OrderCreate(inventory_id=item.id, ordered_quantity="3"))

    def _snapshot(entries):
        return [(e.id, e.status, e.previous_stock, e.new_stock, e.actual_received) for e in entries]

    first = _snapshot(await stock_service.list_ledger_entries(db_session))
    second = _snapshot(await stock_service.list_ledger_entries(db_session))

    assert first == second
    await db_session.refresh(item)
    assert item.stock_on_hand == Decimal("3")


async def test_listing_filters_by_item_and_status(db_session, make_item):
    towels = await make_item(item="Towels")
    soap = await make_item(item="Soap")
    await stock_service.update_stock(db_session, towels.id, StockUpdate(actual_received="1"))
    order = await stock_service.place_order(db_session, OrderCreate(inventory_id=towels.id, ordered_quantity="2"))
    await stock_service.update_stock(db_session, soap.id, StockUpdate(actual_received="4"))

    assert len(await stock_service.list_ledger_entries(db_session)) == 3
    assert len(await stock_service.list_ledger_entries(db_session, inventory_id=towels.id)) == 2
    pending = await stock_service.list_ledger_entries(
        db_session, inventory_id=towels.id, status=TransactionStatus.PENDING
    )
    assert [e.id for e in pending] == [order.id]


async def test_pending_orders_for_item(db_session, make_item):
    item = await make_item()
    order = await stock_service.place_order(db_session, OrderCreate(inventory_id=item.id, ordered_quantity="5"))
    await stock_service.update_stock(db_session, item.id, StockUpdate(actual_received="1"))

    pending = await stock_service.list_pending_orders(db_session, item.id)

    assert [e.id for e in pending] == [order.id]


async def test_pending_orders_for_unknown_item(db_session):
    with pytest.raises(NotFoundError):
        await stock_service.list_pending_orders(db_session, uuid.uuid4())


async def test_get_ledger_entry_not_found(db_session):
    with pytest.raises(NotFoundError):
        await stock_service.get_ledger_entry(db_session, uuid.uuid4())


@pytest.mark.parametrize(
    "stock, stock_up, expected",
    [("2", "5", True), ("5", "5", False), ("9", "", False), ("0", "three", False)],
)
async def test_low_stock_flag(make_item, stock, stock_up, expected):
    item = await make_item(stock=stock, stock_up=stock_up)

    assert item.is_low_stock is expected
