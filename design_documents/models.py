"""
Design Documents - Models.

============================================================
PURPOSE
============================================================
Value types shared by the loader, the synchronizer and the
document stores.

- ViewSpec: a view requested by a model
- DesignDocument: a candidate or published design document
- DesignDocumentPayload: validated wire form (pydantic)
- SyncState: last signature/timestamp known to this process
- SyncResult: outcome of one synchronization pass

============================================================
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field


INDEX_KINDS = ("map", "reduce", "spatial")


# ============================================================
# VIEW SPEC
# ============================================================

@dataclass(frozen=True)
class ViewSpec:
    """A named view, optionally backed by a spatial index."""
    
    name: str
    spatial: bool = False
    
    @property
    def kinds(self) -> tuple:
        """Index kinds to resolve, in digest order."""
        if self.spatial:
            return INDEX_KINDS
        return INDEX_KINDS[:2]
    
    @classmethod
    def parse(cls, text: str) -> "ViewSpec":
        """Parse `name` or `name:spatial`."""
        name, _, flag = text.partition(":")
        if flag and flag != "spatial":
            raise ValueError(f"Unknown view flag {flag!r} in {text!r}")
        return cls(name=name, spatial=flag == "spatial")


ViewLike = Union[str, ViewSpec]


def normalize_views(views: Iterable[ViewLike]) -> List[ViewSpec]:
    """Coerce plain names to ViewSpec, preserving declared order."""
    return [v if isinstance(v, ViewSpec) else ViewSpec(name=v) for v in views]


# ============================================================
# DESIGN DOCUMENT
# ============================================================

class DesignDocumentPayload(BaseModel):
    """Stored representation of a design document."""
    
    id: str
    views: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    spatial: Optional[Dict[str, str]] = None
    signature: Optional[str] = None
    timestamp: int = 0


@dataclass
class DesignDocument:
    """
    A design document bundling the index definitions of one model.
    
    `views` maps view name to {"map": ..., "reduce": ...} (reduce is
    optional); `spatial` maps index name to its body.
    """
    
    identifier: str
    views: Dict[str, Dict[str, str]] = field(default_factory=dict)
    spatial: Dict[str, str] = field(default_factory=dict)
    signature: Optional[str] = None
    timestamp: int = 0
    
    @property
    def is_empty(self) -> bool:
        return not self.views and not self.spatial
    
    def to_payload(self) -> DesignDocumentPayload:
        return DesignDocumentPayload(
            id=self.identifier,
            views={name: dict(body) for name, body in self.views.items()},
            spatial=dict(self.spatial) or None,
            signature=self.signature,
            timestamp=self.timestamp,
        )
    
    def to_json(self) -> str:
        return self.to_payload().model_dump_json(exclude_none=True)
    
    @classmethod
    def from_payload(cls, payload: Union[DesignDocumentPayload, Dict[str, Any]]) -> "DesignDocument":
        if not isinstance(payload, DesignDocumentPayload):
            payload = DesignDocumentPayload.model_validate(payload)
        return cls(
            identifier=payload.id,
            views={name: dict(body) for name, body in payload.views.items()},
            spatial=dict(payload.spatial or {}),
            signature=payload.signature,
            timestamp=payload.timestamp,
        )
    
    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "DesignDocument":
        return cls.from_payload(DesignDocumentPayload.model_validate_json(data))


# ============================================================
# SYNCHRONIZATION STATE
# ============================================================

@dataclass
class SyncState:
    """Signature and timestamp last published or observed as current."""
    
    signature: Optional[str] = None
    timestamp: int = 0
    
    def remember(self, signature: Optional[str], timestamp: int) -> None:
        self.signature = signature
        self.timestamp = int(timestamp or 0)
    
    def is_stale_against(self, candidate: DesignDocument) -> bool:
        """True when the candidate differs and is strictly newer."""
        return (
            candidate.signature != self.signature
            and candidate.timestamp > self.timestamp
        )


@dataclass
class SyncResult:
    """Outcome of one synchronization pass."""
    
    document_id: str
    published: bool
    reason: str
    candidate: DesignDocument
    state: SyncState
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "published": self.published,
            "reason": self.reason,
            "signature": self.candidate.signature,
            "timestamp": self.candidate.timestamp,
            "views": list(self.candidate.views),
            "spatial": list(self.candidate.spatial),
        }


# ============================================================
# NAMING
# ============================================================

_CAMEL_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])|([a-z\d])([A-Z])")


def _underscore(word: str) -> str:
    word = _CAMEL_BOUNDARY.sub(
        lambda m: f"{m.group(1)}_{m.group(2)}" if m.group(1) else f"{m.group(3)}_{m.group(4)}",
        word,
    )
    return word.replace("-", "_").lower()


def design_document_name(model_name: str) -> str:
    """
    Derive a design document identifier from a model name.
    
    Namespace separators become path separators and CamelCase
    segments become snake_case: "Blog.PostComment" and
    "Blog::PostComment" both map to "blog/post_comment".
    """
    segments = re.split(r"::|\.", model_name)
    return "/".join(_underscore(s) for s in segments if s)
