import asyncio
import logging
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.ext.asyncio.session import AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker
from stockledger.core.config import settings

logger = logging.getLogger(__name__)

DB_URL = settings.DB_URL


def enable_sqlite_foreign_keys(bind: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""
    if bind.dialect.name != "sqlite":
        return

    @event.listens_for(bind.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(DB_URL, future=True, echo=settings.DB_ECHO)
enable_sqlite_foreign_keys(engine)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()

_init_task: Optional[asyncio.Task] = None
_initialized = False


async def _create_schema(bind: AsyncEngine) -> None:
    # models must be registered on Base.metadata before create_all
    from stockledger.db.models import inventory, transactions  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready on %s", bind.url.render_as_string(hide_password=True))


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Create the schema once per process.

    The first caller starts the setup; callers arriving while it runs await
    the same task. A failed setup is forgotten so the next call retries.
    """
    global _init_task, _initialized
    if _initialized:
        return

    if _init_task is None:
        _init_task = asyncio.ensure_future(_create_schema(bind or engine))
    task = _init_task

    try:
        await asyncio.shield(task)
    except Exception:
        if _init_task is task:
            _init_task = None
            logger.exception("Database initialization failed")
        raise

    _initialized = True


async def get_db():
    await init_db()
    async with AsyncSessionLocal() as session:
        yield session
