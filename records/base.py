"""
Records - Model Base Class.

============================================================
RESPONSIBILITY
============================================================
Declarative records persisted as JSON documents.

- Attributes come from an explicit Schema, consulted by name
- Keys are minted by the configured identifier generator
- Each record type is bound to a ModelConfiguration with
  Model.configure(); there is no ambient connection lookup

============================================================
USAGE
============================================================
```python
class Post(Model):
    schema = (
        Schema()
        .attribute("title", "body")
        .attribute("author", default="Anonymous")
    )
    views = ["by_author"]

Post.configure(store=MemoryDocumentStore(), uuid_algorithm="random")

post = Post.create(title="Hello world")
post.update(body="Once upon a time...")
Post.find(post.id).author   # 'Anonymous'
```

============================================================
"""

import json
import logging
from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Type, TypeVar, Union

from core.exceptions import Misconfigured, MissingId, UnknownAttribute
from design_documents.models import SyncResult, ViewLike, design_document_name, normalize_views
from design_documents.synchronizer import DesignDocumentSynchronizer
from identifiers.generator import UUIDAlgorithm, UUIDGenerator, get_generator, resolve_algorithm
from storage.exceptions import SerializationError
from storage.interfaces import DocumentStore

from .configuration import ModelConfiguration
from .schema import Schema


logger = logging.getLogger(__name__)

M = TypeVar("M", bound="Model")

TYPE_FIELD = "type"


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class Model:
    """Base class for declarative records."""
    
    schema: ClassVar[Schema] = Schema()
    views: ClassVar[Sequence[ViewLike]] = ()
    design_document: ClassVar[Optional[str]] = None
    
    _configuration: ClassVar[Optional[ModelConfiguration]] = None
    _registry: ClassVar[List[Type["Model"]]] = []
    
    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        parent_schema = super(cls, cls).schema
        if "schema" in cls.__dict__:
            cls.schema = cls.__dict__["schema"].extend(parent_schema)
        cls._configuration = None
        Model._registry.append(cls)
    
    # =========================================================
    # CONFIGURATION
    # =========================================================
    
    @classmethod
    def design_document_id(cls) -> str:
        return cls.design_document or design_document_name(cls.__qualname__)
    
    @classmethod
    def configure(
        cls,
        store: DocumentStore,
        uuid_algorithm: Union[str, UUIDAlgorithm] = UUIDAlgorithm.SEQUENTIAL,
        generator: Optional[UUIDGenerator] = None,
    ) -> ModelConfiguration:
        """Bind this record type to a store and key generation policy."""
        configuration = ModelConfiguration(
            store=store,
            design_document=cls.design_document_id(),
            uuid_algorithm=resolve_algorithm(uuid_algorithm),
            generator=generator or get_generator(),
            views=normalize_views(cls.views),
        )
        cls._configuration = configuration
        logger.debug(
            f"Configured {cls.__qualname__}: store={store.name} "
            f"uuid_algorithm={configuration.uuid_algorithm.value}"
        )
        return configuration
    
    @classmethod
    def configuration(cls) -> ModelConfiguration:
        if cls._configuration is None:
            raise Misconfigured(
                f"{cls.__qualname__} is not configured; call {cls.__qualname__}.configure()",
                config_key="store",
            )
        return cls._configuration
    
    @classmethod
    def ensure_design_document(cls, synchronizer: DesignDocumentSynchronizer) -> SyncResult:
        """
        Publish this type's design document if its view sources changed.
        
        The document always goes to the configured store; `synchronizer`
        supplies search paths and digest.
        """
        configuration = cls.configuration()
        return synchronizer.for_store(configuration.store).synchronize(
            configuration.design_document,
            configuration.views,
            state=configuration.sync_state,
        )
    
    # =========================================================
    # CLASS OPERATIONS
    # =========================================================
    
    @classmethod
    def find(cls: Type[M], id: str) -> M:
        """
        Load a record by id.
        
        Raises:
            RecordNotFoundError: no such key
        """
        raw = cls.configuration().store.get(id)
        return cls._from_bytes(id, raw)
    
    @classmethod
    def exists(cls, id: str) -> bool:
        return bool(id) and cls.configuration().store.exists(id)
    
    @classmethod
    def create(cls: Type[M], **attrs: Any) -> M:
        return cls(**attrs).insert()
    
    @classmethod
    def wrap(cls: Type[M], obj: Union[M, Dict[str, Any]]) -> M:
        """Return obj if it already is a record, else build one from a mapping."""
        if isinstance(obj, cls):
            return obj
        return cls(**dict(obj))
    
    # =========================================================
    # INSTANCE
    # =========================================================
    
    def __init__(self, id: Optional[str] = None, **attrs: Any):
        object.__setattr__(self, "_attributes", self.schema.defaults())
        object.__setattr__(self, "id", id)
        self.update_attributes(attrs)
    
    def __getattr__(self, name: str) -> Any:
        attributes = self.__dict__.get("_attributes")
        if attributes is not None and name in attributes:
            return attributes[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
    
    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.schema:
            self._attributes[name] = value
        else:
            object.__setattr__(self, name, value)
    
    def __getitem__(self, name: str) -> Any:
        self._check_attribute(name)
        return self._attributes[name]
    
    def __setitem__(self, name: str, value: Any) -> None:
        self._check_attribute(name)
        self._attributes[name] = value
    
    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)
    
    @property
    def is_new(self) -> bool:
        """True until the record has an id (not proof of existence)."""
        return not self.id
    
    def update_attributes(self, attrs: Dict[str, Any]) -> None:
        """Assign attributes without persisting."""
        attrs = dict(attrs)
        if attrs.get("id"):
            object.__setattr__(self, "id", attrs.pop("id"))
        attrs.pop("id", None)
        for name, value in attrs.items():
            self[name] = value
    
    def to_document(self) -> Dict[str, Any]:
        document = {TYPE_FIELD: self.configuration().design_document}
        document.update(self._attributes)
        return document
    
    # =========================================================
    # PERSISTENCE
    # =========================================================
    
    def insert(self: M) -> M:
        """
        Store as a new document, minting an id when missing.
        
        Raises:
            DuplicateRecordError: the id is already taken
        """
        configuration = self.configuration()
        if not self.id:
            object.__setattr__(self, "id", configuration.next_id())
        configuration.store.add(self.id, self._to_bytes())
        logger.debug(f"Created {type(self).__qualname__} {self.id}")
        return self
    
    def save(self: M) -> M:
        """Insert when new, otherwise overwrite the stored document."""
        if self.is_new:
            return self.insert()
        self.configuration().store.set(self.id, self._to_bytes())
        return self
    
    def update(self: M, **attrs: Any) -> M:
        self.update_attributes(attrs)
        return self.save()
    
    def delete(self: M) -> M:
        """
        Remove the stored document and clear the id.
        
        Raises:
            MissingId: record has no id
        """
        if not self.id:
            raise MissingId(type(self).__qualname__, "delete")
        self.configuration().store.delete(self.id)
        object.__setattr__(self, "id", None)
        return self
    
    def reload(self: M) -> M:
        """
        Replace attributes with the stored ones.
        
        Raises:
            MissingId: record has no id
        """
        if not self.id:
            raise MissingId(type(self).__qualname__, "reload")
        fresh = type(self).find(self.id)
        self._attributes.update(fresh._attributes)
        return self
    
    def is_persisted(self) -> bool:
        return bool(self.id) and type(self).exists(self.id)
    
    # =========================================================
    # PRIVATE
    # =========================================================
    
    def _check_attribute(self, name: str) -> None:
        if name not in self.schema:
            raise UnknownAttribute(type(self).__qualname__, name)
    
    def _to_bytes(self) -> bytes:
        return json.dumps(self.to_document(), default=_json_default).encode("utf-8")
    
    @classmethod
    def _from_bytes(cls: Type[M], id: str, raw: bytes) -> M:
        try:
            document = json.loads(raw)
        except ValueError as e:
            raise SerializationError(cls.configuration().store.name, id, str(e)) from e
        if not isinstance(document, dict):
            raise SerializationError(cls.configuration().store.name, id, "not a JSON object")
        attrs = {k: v for k, v in document.items() if k in cls.schema}
        return cls(id=id, **attrs)
    
    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id and self._attributes == other._attributes
    
    __hash__ = None
    
    def __repr__(self) -> str:
        parts = [f"{type(self).__qualname__}:{self.id or '?'}"]
        parts.extend(f"{name}={self._attributes[name]!r}" for name in sorted(self._attributes))
        return f"<{' '.join(parts)}>"


def registered_models() -> List[Type[Model]]:
    """All Model subclasses defined so far, in definition order."""
    return list(Model._registry)
