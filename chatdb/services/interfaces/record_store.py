"""
Record Store Interface (IRecordStore)

Abstract base class defining the generic query interface the repository
layer talks to. A record store maps each call to one row-level request
(select/insert/update/delete) against a named table, or to one remote
procedure call.

Implementation guide:
- All methods must be async
- Each call is a single request; implementations must not add retries,
  caching, or multi-call transactions
- Errors from the underlying client propagate unchanged
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, NamedTuple, Optional, Sequence, Union

FilterOp = Literal["eq", "gt", "gte"]

Row = Dict[str, Any]


class Filter(NamedTuple):
    """
    Column predicate applied to a request.

    Attributes:
        column: Exact column name
        op: "eq" (==), "gt" (>, exclusive) or "gte" (>=, inclusive)
        value: Value compared against; timestamps are ISO strings
    """

    column: str
    op: FilterOp
    value: Any


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def gt(column: str, value: Any) -> Filter:
    return Filter(column, "gt", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


class OrderBy(NamedTuple):
    column: str
    descending: bool = False


class IRecordStore(ABC):
    """
    Abstract interface for row-level access to the hosted tables.

    One instance is created per process and shared by every repository
    call; implementations hold no locks and must tolerate concurrent use.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None
    ) -> List[Row]:
        """
        Fetch all rows of ``table`` matching every filter.

        Args:
            table: Exact table name (e.g. "Chat")
            filters: Predicates combined with AND
            order_by: Optional single-column ordering

        Returns:
            List of rows keyed by column name (empty when nothing matches)
        """

    @abstractmethod
    async def insert(
        self,
        table: str,
        rows: Union[Row, Sequence[Row]]
    ) -> None:
        """
        Insert one row or a batch of rows in a single request.

        Raises:
            Exception: Store-specific error on constraint violations
        """

    @abstractmethod
    async def update(
        self,
        table: str,
        values: Row,
        filters: Sequence[Filter]
    ) -> None:
        """
        Set ``values`` on every row matching the filters.
        """

    @abstractmethod
    async def delete(
        self,
        table: str,
        filters: Sequence[Filter]
    ) -> None:
        """
        Delete every row matching the filters.
        """

    @abstractmethod
    async def rpc(
        self,
        name: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Invoke a named remote procedure once and return its result.
        """

    @abstractmethod
    async def close(self) -> None:
        """
        Release the underlying client. Called once at process shutdown.
        """
