"""
Design Documents Package.

Loading view sources from disk and publishing them as
server-side design documents.
"""

from .loader import ViewSourceLoader, strip_comments
from .models import (
    DesignDocument,
    DesignDocumentPayload,
    SyncResult,
    SyncState,
    ViewSpec,
    design_document_name,
    normalize_views,
)
from .synchronizer import DesignDocumentSynchronizer

__all__ = [
    "DesignDocument",
    "DesignDocumentPayload",
    "DesignDocumentSynchronizer",
    "SyncResult",
    "SyncState",
    "ViewSourceLoader",
    "ViewSpec",
    "design_document_name",
    "normalize_views",
    "strip_comments",
]
