"""
Records - Model Configuration.

============================================================
PURPOSE
============================================================
Per record type settings, created once when the type is
configured and passed explicitly to the components that need
them. Nothing here is looked up from ambient or thread state.

- store: where records and design documents live
- uuid_algorithm / generator: how new keys are minted
- design_document / views: which design document to keep
  synchronized, and with which views
- sync_state: remembered signature/timestamp of that document

============================================================
"""

from dataclasses import dataclass, field
from typing import List

from design_documents.models import SyncState, ViewSpec
from identifiers.generator import UUIDAlgorithm, UUIDGenerator, get_generator
from storage.interfaces import DocumentStore


@dataclass
class ModelConfiguration:
    """Explicit configuration of one record type."""
    
    store: DocumentStore
    design_document: str
    uuid_algorithm: UUIDAlgorithm = UUIDAlgorithm.SEQUENTIAL
    generator: UUIDGenerator = field(default_factory=get_generator)
    views: List[ViewSpec] = field(default_factory=list)
    sync_state: SyncState = field(default_factory=SyncState)
    
    def next_id(self) -> str:
        return self.generator.next(1, self.uuid_algorithm)
