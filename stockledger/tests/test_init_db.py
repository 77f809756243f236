from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from stockledger.db import base as db_base


@pytest.fixture()
def fresh_init_state(monkeypatch):
    monkeypatch.setattr(db_base, "_init_task", None)
    monkeypatch.setattr(db_base, "_initialized", False)


async def test_concurrent_callers_share_one_setup(fresh_init_state, monkeypatch):
    calls = []

    async def _slow_create_schema(bind):
        calls.append(bind)
        await asyncio.sleep(0.01)

    monkeypatch.setattr(db_base, "_create_schema", _slow_create_schema)

    await asyncio.gather(*(db_base.init_db() for _ in range(5)))
    await db_base.init_db()

    assert len(calls) == 1
    assert db_base._initialized is True


async def test_failed_setup_is_retried_on_next_call(fresh_init_state, monkeypatch):
    attempts = []

    async def _flaky_create_schema(bind):
        attempts.append(bind)
        if len(attempts) == 1:
            raise ConnectionError("database unavailable")

    monkeypatch.setattr(db_base, "_create_schema", _flaky_create_schema)

    with pytest.raises(ConnectionError):
        await db_base.init_db()
    assert db_base._initialized is False
    assert db_base._init_task is None

    await db_base.init_db()

    assert len(attempts) == 2
    assert db_base._initialized is True


async def test_init_db_creates_tables(fresh_init_state):
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        await db_base.init_db(engine)
        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    finally:
        await engine.dispose()

    assert {"inventory", "transactions"} <= set(tables)
