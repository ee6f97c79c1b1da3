"""
Supabase-backed record store.

Translates IRecordStore calls into PostgREST requests through the async
supabase client. Each call builds one query and awaits one ``execute()``.
Failed requests raise ``postgrest.exceptions.APIError`` (or an httpx
transport error), which propagates to the caller unchanged.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Union

from supabase import AsyncClient, acreate_client

from chatdb.core.logging_config import get_logger
from chatdb.services.interfaces.record_store import (
    Filter,
    IRecordStore,
    OrderBy,
    Row,
)

logger = get_logger(__name__)


class SupabaseRecordStore(IRecordStore):
    """
    Record store over a hosted Supabase project.

    Attributes:
        client: Long-lived supabase AsyncClient shared by all requests
    """

    def __init__(self, client: AsyncClient):
        """
        Initialize store with an already-created client.

        Args:
            client: supabase AsyncClient (see ``connect``)
        """
        self.client = client

    @classmethod
    async def connect(cls, url: str, key: str) -> "SupabaseRecordStore":
        """
        Create the supabase client and wrap it.

        Args:
            url: Project base URL
            key: Access key

        Returns:
            Ready-to-use SupabaseRecordStore
        """
        client = await acreate_client(url, key)
        logger.info("Supabase client created", extra={"supabase_url": url})
        return cls(client)

    @staticmethod
    def _apply_filters(query: Any, filters: Sequence[Filter]) -> Any:
        # PostgREST builder methods share the operator names: eq/gt/gte
        for column, op, value in filters:
            query = getattr(query, op)(column, value)
        return query

    async def _execute(self, query: Any, table: str, action: str) -> Any:
        start = time.perf_counter()
        response = await query.execute()
        logger.debug(
            "Store request completed",
            extra={
                "table": table,
                "action": action,
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return response

    async def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None
    ) -> List[Row]:
        query = self._apply_filters(self.client.table(table).select("*"), filters)
        if order_by is not None:
            query = query.order(order_by.column, desc=order_by.descending)

        response = await self._execute(query, table, "select")
        return response.data or []

    async def insert(
        self,
        table: str,
        rows: Union[Row, Sequence[Row]]
    ) -> None:
        payload = rows if isinstance(rows, dict) else list(rows)
        await self._execute(self.client.table(table).insert(payload), table, "insert")

    async def update(
        self,
        table: str,
        values: Row,
        filters: Sequence[Filter]
    ) -> None:
        query = self._apply_filters(self.client.table(table).update(values), filters)
        await self._execute(query, table, "update")

    async def delete(
        self,
        table: str,
        filters: Sequence[Filter]
    ) -> None:
        query = self._apply_filters(self.client.table(table).delete(), filters)
        await self._execute(query, table, "delete")

    async def rpc(
        self,
        name: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        response = await self._execute(
            self.client.rpc(name, params or {}), name, "rpc"
        )
        return response.data

    async def close(self) -> None:
        """
        Close the PostgREST HTTP session.
        """
        await self.client.postgrest.aclose()
