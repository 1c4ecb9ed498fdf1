"""
Design Documents - View Source Loader.

============================================================
RESPONSIBILITY
============================================================
Builds a candidate design document from view source files.

LAYOUT (per search root):
    <root>/<document-id>/<view-name>/map.js
    <root>/<document-id>/<view-name>/reduce.js
    <root>/<document-id>/<view-name>/spatial.js

- Full-line `//` comments are dropped, the rest kept verbatim
- The first root holding a non-empty file wins per (view, kind)
- Views without a map are left out of the document
- Signature: one running digest over the stripped bytes of every
  contributing body, in declared view order, map then reduce then
  spatial; published bodies are those bytes decoded as UTF-8, with
  undecodable bytes replaced
- Timestamp: max mtime (epoch seconds) of contributing files

============================================================
"""

import hashlib
import logging
import os
from pathlib import Path
from typing import AnyStr, Iterable, List, Optional, Sequence, Tuple, Union

from core.exceptions import Misconfigured

from .models import DesignDocument, ViewLike, normalize_views


logger = logging.getLogger(__name__)


def strip_comments(text: AnyStr) -> AnyStr:
    """
    Drop lines starting with `//` (after indentation), then strip.
    
    Works on str or bytes. Only a line feed ends a line.
    """
    newline, marker = ("\n", "//") if isinstance(text, str) else (b"\n", b"//")
    parts = text.split(newline)
    lines = [part + newline for part in parts[:-1]] + parts[-1:]
    kept = [line for line in lines if not line.lstrip().startswith(marker)]
    return text[:0].join(kept).strip()


class ViewSourceLoader:
    """Resolves view sources across ordered search roots."""
    
    def __init__(
        self,
        search_paths: Sequence[Union[str, Path]],
        hash_algorithm: str = "md5",
    ):
        """
        Initialize the loader.
        
        Args:
            search_paths: Candidate roots, highest precedence first
            hash_algorithm: hashlib algorithm name for signatures
        """
        self._search_paths = [Path(p) for p in search_paths or []]
        self._hash_algorithm = hash_algorithm
        try:
            hashlib.new(hash_algorithm)
        except ValueError as e:
            raise Misconfigured(
                f"unsupported hash algorithm {hash_algorithm!r}",
                config_key="hash_algorithm",
            ) from e
    
    @property
    def search_paths(self) -> List[Path]:
        return list(self._search_paths)
    
    @property
    def hash_algorithm(self) -> str:
        return self._hash_algorithm
    
    # =========================================================
    # PUBLIC API
    # =========================================================
    
    def load(self, document_id: str, views: Iterable[ViewLike]) -> DesignDocument:
        """
        Build the candidate design document.
        
        Raises:
            Misconfigured: no search paths configured
        """
        if not self._search_paths:
            raise Misconfigured(
                "design document search paths must be configured",
                config_key="design_documents_paths",
            )
        
        digest = hashlib.new(self._hash_algorithm)
        document = DesignDocument(identifier=document_id)
        mtime = 0
        
        for view in normalize_views(views):
            body = {}
            for kind in view.kinds:
                found = self.resolve(document_id, view.name, kind)
                if found is None:
                    continue
                raw, file_mtime = found
                digest.update(raw)
                contents = raw.decode("utf-8", errors="replace")
                mtime = max(mtime, file_mtime)
                if kind == "spatial":
                    document.spatial[view.name] = contents
                else:
                    body[kind] = contents
            if "map" in body:
                document.views[view.name] = body
            elif body:
                logger.debug(f"{document_id}/{view.name}: reduce without map, view skipped")
        
        document.signature = digest.hexdigest()
        document.timestamp = mtime
        return document
    
    def resolve(self, document_id: str, view: str, kind: str) -> Optional[Tuple[bytes, int]]:
        """Return (stripped bytes, mtime) from the first root with a non-empty file."""
        for root in self._search_paths:
            path = root / document_id / view / f"{kind}.js"
            if not path.is_file():
                continue
            contents = strip_comments(path.read_bytes())
            if not contents:
                continue
            file_mtime = int(os.stat(path).st_mtime)
            logger.debug(f"Resolved {document_id}/{view}/{kind} from {root}")
            return contents, file_mtime
        return None
