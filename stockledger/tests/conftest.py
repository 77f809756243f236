from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stockledger.db.base import Base, enable_sqlite_foreign_keys, get_db
from stockledger.db.models.inventory import InventoryItem
from stockledger.db.models import transactions as transaction_models  # noqa: F401
from stockledger.main import app


@pytest.fixture()
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def make_item(db_session):
    async def _make_item(stock="0", **fields):
        fields.setdefault("item", "Paper towels")
        fields.setdefault("units", "case")
        item = InventoryItem(stock_on_hand=Decimal(stock), **fields)
        db_session.add(item)
        await db_session.commit()
        return item

    return _make_item


@pytest.fixture()
async def client(session_factory):
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
            yield http_client
    finally:
        app.dependency_overrides.clear()
