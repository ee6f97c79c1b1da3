"""Service interface contracts (ABCs)"""

from chatdb.services.interfaces.record_store import (
    Filter,
    IRecordStore,
    OrderBy,
    Row,
    eq,
    gt,
    gte,
)

__all__ = [
    'Filter',
    'IRecordStore',
    'OrderBy',
    'Row',
    'eq',
    'gt',
    'gte',
]
