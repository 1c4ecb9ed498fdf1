"""
Storage - Document Store Interface.

============================================================
PURPOSE
============================================================
The capabilities the document model needs from a key-value /
document store:

- blobs by key: get, set (upsert), add (insert-only), delete
- design documents by identifier: read, full replace

Implementations raise storage.exceptions errors only.

============================================================
"""

from abc import ABC, abstractmethod
from typing import Optional

from design_documents.models import DesignDocument


class DocumentStore(ABC):
    """Abstract key-value store with design document support."""
    
    name: str = "DocumentStore"
    
    # --------------------------------------------------------
    # KEY-VALUE OPERATIONS
    # --------------------------------------------------------
    
    @abstractmethod
    def get(self, key: str) -> bytes:
        """
        Read a value.
        
        Raises:
            RecordNotFoundError: key does not exist
        """
    
    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Write a value unconditionally."""
    
    @abstractmethod
    def add(self, key: str, value: bytes) -> None:
        """
        Write a value only if the key is new.
        
        Raises:
            DuplicateRecordError: key already exists
        """
    
    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a value.
        
        Raises:
            RecordNotFoundError: key does not exist
        """
    
    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether a key exists."""
    
    # --------------------------------------------------------
    # DESIGN DOCUMENTS
    # --------------------------------------------------------
    
    @abstractmethod
    def get_design_document(self, document_id: str) -> Optional[DesignDocument]:
        """Read a design document, None when absent."""
    
    @abstractmethod
    def save_design_document(self, document: DesignDocument) -> None:
        """Replace a design document."""
