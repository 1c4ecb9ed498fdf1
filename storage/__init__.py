"""
Storage Package.

Document stores used by the model layer.

Modules:
- interfaces: DocumentStore contract
- memory_store: In-process store
- sql_store: SQLAlchemy-backed store
- database: Engine and session management
- exceptions: Store error hierarchy
"""

from .exceptions import (
    DuplicateRecordError,
    QueryError,
    RecordNotFoundError,
    SerializationError,
    StoreException,
    StoreUnavailable,
)
from .interfaces import DocumentStore
from .memory_store import MemoryDocumentStore

__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "DuplicateRecordError",
    "QueryError",
    "RecordNotFoundError",
    "SerializationError",
    "StoreException",
    "StoreUnavailable",
]
