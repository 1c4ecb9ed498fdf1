"""
Storage - SQL Document Store.

============================================================
PURPOSE
============================================================
DocumentStore backed by a relational database through the
SQLAlchemy ORM. Every operation runs in its own short
transaction.

============================================================
ERROR MAPPING
============================================================
OperationalError         -> StoreUnavailable
IntegrityError on insert -> DuplicateRecordError
other SQLAlchemyError    -> QueryError

============================================================
"""

import logging
from typing import NoReturn, Optional

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    IntegrityError as SQLAlchemyIntegrityError,
    OperationalError,
    SQLAlchemyError,
)

from design_documents.models import DesignDocument

from .database import create_all_tables, get_session_factory, transaction_scope
from .exceptions import (
    DuplicateRecordError,
    QueryError,
    RecordNotFoundError,
    SerializationError,
    StoreUnavailable,
)
from .interfaces import DocumentStore
from .models import DesignDocumentRecord, DocumentRecord


logger = logging.getLogger(__name__)


class SqlDocumentStore(DocumentStore):
    """
    Document store on top of SQLAlchemy.
    
    ============================================================
    USAGE
    ============================================================
    ```python
    engine = create_database_engine(StoreConfig.from_env())
    store = SqlDocumentStore(engine, create_tables=True)
    store.set("post-1", b'{"title": "Hello"}')
    ```
    
    ============================================================
    """
    
    name = "SqlDocumentStore"
    
    def __init__(self, engine: Engine, create_tables: bool = False) -> None:
        """
        Initialize the store.
        
        Args:
            engine: SQLAlchemy engine
            create_tables: Create missing tables on startup
        """
        self._engine = engine
        self._session_factory = get_session_factory(engine)
        if create_tables:
            create_all_tables(engine)
    
    @property
    def engine(self) -> Engine:
        return self._engine
    
    # =========================================================
    # KEY-VALUE OPERATIONS
    # =========================================================
    
    def get(self, key: str) -> bytes:
        try:
            with transaction_scope(self._session_factory) as session:
                record = session.get(DocumentRecord, key)
                value = record.value if record is not None else None
        except SQLAlchemyError as e:
            self._handle_db_error(e, "get", key)
        if value is None:
            raise RecordNotFoundError(self.name, key)
        return value
    
    def set(self, key: str, value: bytes) -> None:
        try:
            with transaction_scope(self._session_factory) as session:
                record = session.get(DocumentRecord, key)
                if record is None:
                    session.add(DocumentRecord(key=key, value=bytes(value)))
                else:
                    record.value = bytes(value)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "set", key)
        logger.debug(f"Set {key}")
    
    def add(self, key: str, value: bytes) -> None:
        try:
            with transaction_scope(self._session_factory) as session:
                if session.get(DocumentRecord, key) is not None:
                    raise DuplicateRecordError(self.name, key)
                session.add(DocumentRecord(key=key, value=bytes(value)))
        except SQLAlchemyError as e:
            self._handle_db_error(e, "add", key)
        logger.debug(f"Added {key}")
    
    def delete(self, key: str) -> None:
        try:
            with transaction_scope(self._session_factory) as session:
                record = session.get(DocumentRecord, key)
                if record is None:
                    raise RecordNotFoundError(self.name, key, operation="delete")
                session.delete(record)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "delete", key)
        logger.debug(f"Deleted {key}")
    
    def exists(self, key: str) -> bool:
        try:
            with transaction_scope(self._session_factory) as session:
                return session.get(DocumentRecord, key) is not None
        except SQLAlchemyError as e:
            self._handle_db_error(e, "exists", key)
    
    # =========================================================
    # DESIGN DOCUMENTS
    # =========================================================
    
    def get_design_document(self, document_id: str) -> Optional[DesignDocument]:
        try:
            with transaction_scope(self._session_factory) as session:
                record = session.get(DesignDocumentRecord, document_id)
                body = record.body if record is not None else None
        except SQLAlchemyError as e:
            self._handle_db_error(e, "get_design_document", document_id)
        if body is None:
            return None
        try:
            return DesignDocument.from_json(body)
        except ValidationError as e:
            raise SerializationError(self.name, document_id, str(e)) from e
    
    def save_design_document(self, document: DesignDocument) -> None:
        body = document.to_json()
        try:
            with transaction_scope(self._session_factory) as session:
                record = session.get(DesignDocumentRecord, document.identifier)
                if record is None:
                    record = DesignDocumentRecord(document_id=document.identifier)
                    session.add(record)
                record.body = body
                record.signature = document.signature
                record.source_timestamp = document.timestamp
        except SQLAlchemyError as e:
            self._handle_db_error(e, "save_design_document", document.identifier)
        logger.debug(f"Saved design document {document.identifier}")
    
    # =========================================================
    # PROTECTED HELPER METHODS
    # =========================================================
    
    def _handle_db_error(self, error: SQLAlchemyError, operation: str, key: str) -> NoReturn:
        """
        Wrap a database error in a store exception.
        
        Raises:
            StoreException: Always raises appropriate exception
        """
        logger.error(
            f"Database error in {operation}({key!r}): {error}",
            exc_info=True,
        )
        
        if isinstance(error, OperationalError):
            raise StoreUnavailable(self.name, operation, str(error)) from error
        
        if isinstance(error, SQLAlchemyIntegrityError) and operation == "add":
            raise DuplicateRecordError(self.name, key) from error
        
        raise QueryError(self.name, operation, str(error)) from error
