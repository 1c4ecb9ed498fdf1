"""
Design Documents - Synchronizer.

============================================================
RESPONSIBILITY
============================================================
Keeps a server-side design document in step with the view
sources on disk, publishing only when necessary and never
replacing a newer published version with older content.

============================================================
PUBLISH RULE
============================================================
Both must hold:
1. Local: the candidate signature differs from the remembered
   one AND the candidate timestamp is strictly greater than the
   remembered timestamp.
2. Server: no stored document exists, OR the stored signature
   differs AND the candidate timestamp is strictly greater than
   the stored timestamp.

After a publish the remembered state is the candidate's. When
the server check fails the remembered state becomes the stored
document's. When the local check fails nothing is read, written
or remembered.

============================================================
CONCURRENCY
============================================================
Passes for the same document identifier are serialized by a
per-identifier lock. Store errors propagate without retry.

============================================================
"""

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence, Union

from .loader import ViewSourceLoader
from .models import SyncResult, SyncState, ViewLike

if TYPE_CHECKING:
    from storage.interfaces import DocumentStore


logger = logging.getLogger(__name__)


class DesignDocumentSynchronizer:
    """
    Publishes design documents when their sources change.
    
    ============================================================
    USAGE
    ============================================================
    ```python
    sync = DesignDocumentSynchronizer(store, ["app/models"])
    result = sync.synchronize("post", ["by_author", "recent"])
    if result.published:
        ...
    ```
    
    ============================================================
    """
    
    def __init__(
        self,
        store: "DocumentStore",
        search_paths: Sequence[Union[str, Path]],
        hash_algorithm: str = "md5",
    ):
        """
        Initialize the synchronizer.
        
        Args:
            store: Document store holding design documents
            search_paths: View source roots, highest precedence first
            hash_algorithm: hashlib algorithm name for signatures
        """
        self._store = store
        self._loader = ViewSourceLoader(search_paths, hash_algorithm=hash_algorithm)
        self._states: Dict[str, SyncState] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._siblings: Dict[int, "DesignDocumentSynchronizer"] = {}
        self._registry_lock = threading.Lock()
    
    @property
    def store(self) -> "DocumentStore":
        return self._store
    
    @property
    def loader(self) -> ViewSourceLoader:
        return self._loader
    
    def for_store(self, store: "DocumentStore") -> "DesignDocumentSynchronizer":
        """
        Synchronizer publishing to `store` with the same search paths
        and digest. Returns self for its own store; others are created
        once and reused.
        """
        if store is self._store:
            return self
        with self._registry_lock:
            sibling = self._siblings.get(id(store))
            if sibling is None:
                sibling = DesignDocumentSynchronizer(
                    store,
                    self._loader.search_paths,
                    hash_algorithm=self._loader.hash_algorithm,
                )
                self._siblings[id(store)] = sibling
            return sibling
    
    def state_for(self, document_id: str) -> SyncState:
        """Remembered state for a document, created on first use."""
        with self._registry_lock:
            state = self._states.get(document_id)
            if state is None:
                state = self._states[document_id] = SyncState()
            return state
    
    # =========================================================
    # PUBLIC API
    # =========================================================
    
    def synchronize(
        self,
        document_id: str,
        views: Iterable[ViewLike],
        state: Optional[SyncState] = None,
    ) -> SyncResult:
        """
        Publish the design document if it is stale.
        
        Args:
            document_id: Design document identifier
            views: Views to resolve, in declared order
            state: Remembered state to use instead of the
                synchronizer's own per-document entry
            
        Returns:
            SyncResult describing the decision
            
        Raises:
            Misconfigured: no search paths configured
        """
        views = list(views)
        if state is None:
            state = self.state_for(document_id)
        
        with self._lock_for(document_id):
            candidate = self._loader.load(document_id, views)
            
            if not state.is_stale_against(candidate):
                logger.debug(
                    f"Design document {document_id} unchanged locally "
                    f"(signature={candidate.signature}, timestamp={candidate.timestamp})"
                )
                return SyncResult(document_id, False, "unchanged", candidate, state)
            
            current = self._store.get_design_document(document_id)
            if current is not None:
                server_state = SyncState(current.signature, current.timestamp)
                if not server_state.is_stale_against(candidate):
                    state.remember(server_state.signature, server_state.timestamp)
                    logger.info(
                        f"Design document {document_id} is current on the server "
                        f"(signature={current.signature}, timestamp={current.timestamp})"
                    )
                    return SyncResult(document_id, False, "server_current", candidate, state)
            
            self._store.save_design_document(candidate)
            state.remember(candidate.signature, candidate.timestamp)
            logger.info(
                f"Published design document {document_id} "
                f"views={list(candidate.views)} spatial={list(candidate.spatial)} "
                f"signature={candidate.signature} timestamp={candidate.timestamp}"
            )
            return SyncResult(document_id, True, "published", candidate, state)
    
    # =========================================================
    # PRIVATE
    # =========================================================
    
    def _lock_for(self, document_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(document_id)
            if lock is None:
                lock = self._locks[document_id] = threading.Lock()
            return lock
