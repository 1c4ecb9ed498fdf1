"""
Storage Models Package.

ORM tables backing the SQL document store.
"""

from .documents import Base, DesignDocumentRecord, DocumentRecord

__all__ = [
    "Base",
    "DesignDocumentRecord",
    "DocumentRecord",
]
