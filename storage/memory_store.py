"""
Storage - In-Memory Document Store.

Dictionary-backed store for tests and single-process tools.
Design documents are kept in their serialized form so that
reads return independent copies.
"""

import logging
import threading
from typing import Dict, List, Optional

from design_documents.models import DesignDocument

from .exceptions import DuplicateRecordError, RecordNotFoundError
from .interfaces import DocumentStore


logger = logging.getLogger(__name__)


class MemoryDocumentStore(DocumentStore):
    """Thread-safe in-memory store."""
    
    name = "MemoryDocumentStore"
    
    def __init__(self):
        self._values: Dict[str, bytes] = {}
        self._design_documents: Dict[str, str] = {}
        self._lock = threading.Lock()
        self.design_document_writes: List[str] = []
    
    def get(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._values[key]
            except KeyError:
                raise RecordNotFoundError(self.name, key) from None
    
    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._values[key] = bytes(value)
    
    def add(self, key: str, value: bytes) -> None:
        with self._lock:
            if key in self._values:
                raise DuplicateRecordError(self.name, key)
            self._values[key] = bytes(value)
    
    def delete(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is None:
                raise RecordNotFoundError(self.name, key, operation="delete")
    
    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._values
    
    def get_design_document(self, document_id: str) -> Optional[DesignDocument]:
        with self._lock:
            data = self._design_documents.get(document_id)
        return DesignDocument.from_json(data) if data is not None else None
    
    def save_design_document(self, document: DesignDocument) -> None:
        data = document.to_json()
        with self._lock:
            self._design_documents[document.identifier] = data
            self.design_document_writes.append(document.identifier)
        logger.debug(f"Stored design document {document.identifier}")
