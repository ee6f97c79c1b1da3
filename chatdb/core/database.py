"""
Record store construction and lifecycle.

Provides SQLAlchemy async engine setup for the local backend and the
factory that builds the single record store a process uses. The store is
created explicitly at startup and closed at shutdown; nothing here keeps
module-level client state.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from chatdb.core.config import Settings
from chatdb.core.logging_config import get_logger
from chatdb.services.interfaces.record_store import IRecordStore

logger = get_logger(__name__)


def get_async_engine(database_url: str) -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    For SQLite:
    - In-memory databases use StaticPool (one shared connection holds the
      data); file databases keep the default pool, one connection per request
    - Enables check_same_thread=False for async compatibility
    - Turns on foreign key enforcement
    - Sets WAL mode for file databases

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite+aiosqlite:///:memory:"

    Returns:
        Configured AsyncEngine instance
    """
    is_sqlite = "sqlite" in database_url
    is_memory = ":memory:" in database_url

    # SQLite-specific connection arguments (noop for other drivers)
    connect_args: dict = {"check_same_thread": False} if is_sqlite else {}

    engine_kwargs = {
        "echo": False,  # Set to True for SQL query logging (debug only)
        "connect_args": connect_args,
    }

    if is_memory:
        engine_kwargs["poolclass"] = StaticPool

    engine = create_async_engine(database_url, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if not is_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


async def create_record_store(settings: Settings) -> IRecordStore:
    """
    Build the record store selected by ``settings.store_backend``.

    Args:
        settings: Validated settings (credentials already checked)

    Returns:
        SupabaseRecordStore for "supabase", SQLRecordStore for "sql"

    Example:
        store = await create_record_store(Settings())
        repo = ChatRepository(store)
    """
    if settings.store_backend == "sql":
        from chatdb.services.sql_store import SQLRecordStore

        logger.info("Using SQL record store", extra={"database_url": settings.database_url})
        return SQLRecordStore(get_async_engine(settings.database_url))

    from chatdb.services.supabase_store import SupabaseRecordStore

    return await SupabaseRecordStore.connect(settings.supabase_url, settings.supabase_key)


@asynccontextmanager
async def record_store_context(settings: Settings) -> AsyncIterator[IRecordStore]:
    """
    Own the process-wide record store for the duration of a block.

    Yields:
        The store created by ``create_record_store``

    Example:
        async with record_store_context(settings) as store:
            repo = ChatRepository(store)
            await repo.get_chat_by_id("...")

    Note:
        The store is closed on exit even if the block raises.
    """
    store = await create_record_store(settings)
    try:
        yield store
    finally:
        await store.close()
