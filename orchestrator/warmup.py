"""
Orchestrator - Warm-up.

============================================================
RESPONSIBILITY
============================================================
Process start-up pass that brings every configured record
type's design document up to date.

- Runs once per process, one record type at a time
- Each design document is published to the store its record
  type was configured with
- Store unavailability is logged and ends the pass; the
  process keeps starting (best-effort)
- Every other error propagates

============================================================
"""

import logging
from typing import Iterable, List, Optional, Type

from core.config import SyncConfig
from design_documents.models import SyncResult
from design_documents.synchronizer import DesignDocumentSynchronizer
from records.base import Model, registered_models
from storage.exceptions import StoreUnavailable
from storage.interfaces import DocumentStore


logger = logging.getLogger(__name__)


def build_synchronizer(store: DocumentStore, config: SyncConfig) -> DesignDocumentSynchronizer:
    """Synchronizer for a store, using configured search paths and digest."""
    return DesignDocumentSynchronizer(
        store,
        config.design_documents_paths,
        hash_algorithm=config.hash_algorithm,
    )


def ensure_design_documents(
    synchronizer: DesignDocumentSynchronizer,
    models: Optional[Iterable[Type[Model]]] = None,
) -> List[SyncResult]:
    """
    Synchronize the design documents of configured record types.
    
    Args:
        synchronizer: Synchronizer to run
        models: Record types (all registered types by default);
            unconfigured ones are skipped
            
    Returns:
        One SyncResult per synchronized type, in order
    """
    results = []
    for model in (registered_models() if models is None else models):
        if model._configuration is None:
            logger.debug(f"Skipping unconfigured model {model.__qualname__}")
            continue
        try:
            results.append(model.ensure_design_document(synchronizer))
        except StoreUnavailable as e:
            logger.warning(f"Design document warm-up stopped at {model.__qualname__}: {e}")
            break
    
    published = [r.document_id for r in results if r.published]
    logger.info(f"Design document warm-up done: {len(results)} checked, published={published}")
    return results


def warm_up(
    store: DocumentStore,
    config: SyncConfig,
    models: Optional[Iterable[Type[Model]]] = None,
) -> List[SyncResult]:
    """
    Run ensure_design_documents when enabled by configuration.
    
    `store` backs the base synchronizer; record types configured with
    another store still publish to their own.
    """
    if not config.ensure_design_documents:
        logger.info("Design document warm-up disabled")
        return []
    return ensure_design_documents(build_synchronizer(store, config), models)
