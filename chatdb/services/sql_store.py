"""
SQLAlchemy-backed record store.

Runs the same row-level requests as the hosted store against a local
database described by the ORM tables in ``chatdb.models``. Used for local
development and the test suite.

Every call runs in its own short transaction and commits on return, so
multi-call operations behave like a sequence of independent remote
requests. On a single shared connection (in-memory SQLite) requests are
serialized, since transactions on one connection cannot overlap.
"""

import asyncio
import operator
import time
from contextlib import nullcontext
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from chatdb import models  # noqa: F401 - registers every table on Base.metadata
from chatdb.core.logging_config import get_logger
from chatdb.models.base import Base
from chatdb.services.interfaces.record_store import (
    Filter,
    IRecordStore,
    OrderBy,
    Row,
)

logger = get_logger(__name__)

_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "eq": operator.eq,
    "gt": operator.gt,
    "gte": operator.ge,
}


class SQLRecordStore(IRecordStore):
    """
    Record store over an async SQLAlchemy engine.

    Attributes:
        engine: AsyncEngine owning the connection pool
        session_maker: Factory for per-request sessions
        request_lock: Held for each request when the engine has one shared
            connection, None otherwise
    """

    def __init__(self, engine: AsyncEngine):
        """
        Initialize store with an engine.

        Args:
            engine: Async engine (see ``chatdb.core.database.get_async_engine``)
        """
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self.request_lock: Optional[asyncio.Lock] = (
            asyncio.Lock() if isinstance(engine.sync_engine.pool, StaticPool) else None
        )

    @staticmethod
    def _table(name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise ValueError(f"Unknown table: {name!r}") from None

    @staticmethod
    def _where(table: Table, filters: Sequence[Filter]) -> List[Any]:
        return [
            _OPERATORS[op](table.c[column], value)
            for column, op, value in filters
        ]

    def _serialized(self) -> Any:
        return self.request_lock if self.request_lock is not None else nullcontext()

    async def _execute(self, stmt: Any, params: Any) -> Any:
        async with self.session_maker.begin() as session:
            if params is None:
                result = await session.execute(stmt)
            else:
                result = await session.execute(stmt, params)
            return result.mappings().all() if result.returns_rows else None

    async def _run(self, stmt: Any, table: str, action: str, params: Any = None) -> Any:
        start = time.perf_counter()
        async with self._serialized():
            rows = await self._execute(stmt, params)

        logger.debug(
            "Store request completed",
            extra={
                "table": table,
                "action": action,
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return rows

    async def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None
    ) -> List[Row]:
        sql_table = self._table(table)
        stmt = select(sql_table).where(*self._where(sql_table, filters))
        if order_by is not None:
            column = sql_table.c[order_by.column]
            stmt = stmt.order_by(column.desc() if order_by.descending else column.asc())

        rows = await self._run(stmt, table, "select")
        return [dict(row) for row in rows]

    async def insert(
        self,
        table: str,
        rows: Union[Row, Sequence[Row]]
    ) -> None:
        payload = [rows] if isinstance(rows, dict) else list(rows)
        if not payload:
            return
        await self._run(insert(self._table(table)), table, "insert", payload)

    async def update(
        self,
        table: str,
        values: Row,
        filters: Sequence[Filter]
    ) -> None:
        sql_table = self._table(table)
        stmt = update(sql_table).where(*self._where(sql_table, filters)).values(**values)
        await self._run(stmt, table, "update")

    async def delete(
        self,
        table: str,
        filters: Sequence[Filter]
    ) -> None:
        sql_table = self._table(table)
        stmt = delete(sql_table).where(*self._where(sql_table, filters))
        await self._run(stmt, table, "delete")

    async def rpc(
        self,
        name: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Run a named procedure locally.

        Only ``init_schema`` exists here: it creates any missing tables from
        the ORM metadata and is safe to repeat.

        Raises:
            NotImplementedError: For any other procedure name
        """
        if name != "init_schema":
            raise NotImplementedError(f"Procedure {name!r} is not available on the SQL store")

        async with self._serialized():
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Local schema initialized", extra={"tables": sorted(Base.metadata.tables)})
        return None

    async def close(self) -> None:
        await self.engine.dispose()
