"""
Tests for Document Stores.

============================================================
TEST SCENARIOS
============================================================
1. Key-value contract (memory and SQL)
2. Design document persistence
3. SQL error mapping

============================================================
"""

import pytest
from sqlalchemy import text

from core.config import StoreConfig
from design_documents.models import DesignDocument
from storage.database import (
    create_all_tables,
    create_database_engine,
    get_session_factory,
    transaction_scope,
    verify_connection,
)
from storage.exceptions import (
    DuplicateRecordError,
    RecordNotFoundError,
    SerializationError,
    StoreException,
    StoreUnavailable,
)
from storage.models import DocumentRecord
from storage.sql_store import SqlDocumentStore


def _design_document(**overrides):
    values = dict(
        identifier="post",
        views={"by_author": {"map": "emit(doc.author);", "reduce": "_count"}},
        spatial={"nearby": "emit(doc.geo);"},
        signature="abc123",
        timestamp=1_700_000_000,
    )
    values.update(overrides)
    return DesignDocument(**values)


# ============================================================
# TEST: KEY-VALUE CONTRACT
# ============================================================

class TestKeyValue:
    """Blob operations behave the same on every store."""
    
    def test_set_then_get(self, store):
        store.set("post-1", b'{"title": "Hello"}')
        
        assert store.get("post-1") == b'{"title": "Hello"}'
    
    def test_set_overwrites(self, store):
        store.set("post-1", b"one")
        store.set("post-1", b"two")
        
        assert store.get("post-1") == b"two"
    
    def test_get_missing(self, store):
        with pytest.raises(RecordNotFoundError) as exc_info:
            store.get("missing")
        
        assert exc_info.value.key == "missing"
        assert exc_info.value.operation == "get"
    
    def test_add_new_key(self, store):
        store.add("post-1", b"one")
        
        assert store.exists("post-1")
    
    def test_add_existing_key(self, store):
        store.add("post-1", b"one")
        
        with pytest.raises(DuplicateRecordError):
            store.add("post-1", b"two")
        
        assert store.get("post-1") == b"one"
    
    def test_delete(self, store):
        store.set("post-1", b"one")
        
        store.delete("post-1")
        
        assert not store.exists("post-1")
    
    def test_delete_missing(self, store):
        with pytest.raises(RecordNotFoundError) as exc_info:
            store.delete("missing")
        
        assert exc_info.value.operation == "delete"
    
    def test_errors_share_base(self, store):
        with pytest.raises(StoreException):
            store.get("missing")


# ============================================================
# TEST: DESIGN DOCUMENTS
# ============================================================

class TestDesignDocuments:
    """Design documents are replaced wholesale and read back intact."""
    
    def test_absent(self, store):
        assert store.get_design_document("post") is None
    
    def test_save_and_read(self, store):
        document = _design_document()
        
        store.save_design_document(document)
        
        assert store.get_design_document("post") == document
    
    def test_save_replaces(self, store):
        store.save_design_document(_design_document())
        replacement = _design_document(views={"recent": {"map": "emit(doc.at);"}}, spatial={})
        
        store.save_design_document(replacement)
        
        stored = store.get_design_document("post")
        assert stored.views == {"recent": {"map": "emit(doc.at);"}}
        assert stored.spatial == {}
    
    def test_reads_are_copies(self, store):
        store.save_design_document(_design_document())
        
        store.get_design_document("post").views.clear()
        
        assert store.get_design_document("post").views
    
    def test_design_documents_separate_from_values(self, store):
        store.save_design_document(_design_document())
        
        assert not store.exists("post")


# ============================================================
# TEST: SQL STORE
# ============================================================

class TestSqlStore:
    """SQL-specific behaviour and error mapping."""
    
    def test_values_survive_new_store(self, sqlite_engine, sql_store):
        sql_store.set("post-1", b"one")
        
        reopened = SqlDocumentStore(sqlite_engine)
        
        assert reopened.get("post-1") == b"one"
    
    def test_corrupt_design_document(self, sqlite_engine, sql_store):
        sql_store.save_design_document(_design_document())
        with sqlite_engine.begin() as conn:
            conn.execute(text("UPDATE design_documents SET body = 'not json'"))
        
        with pytest.raises(SerializationError):
            sql_store.get_design_document("post")
    
    def test_unreachable_database(self):
        engine = create_database_engine(
            StoreConfig(database_url="sqlite:////nonexistent/directory/store.db")
        )
        try:
            with pytest.raises(StoreUnavailable):
                SqlDocumentStore(engine, create_tables=True)
            with pytest.raises(StoreUnavailable):
                verify_connection(engine)
        finally:
            engine.dispose()
    
    def test_missing_tables_raise_store_error(self, sqlite_engine):
        store = SqlDocumentStore(sqlite_engine)
        
        with pytest.raises(StoreException):
            store.get("post-1")
    
    def test_verify_connection(self, sqlite_engine):
        assert verify_connection(sqlite_engine) is True
    
    def test_engine_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOCMODEL_DATABASE_URL", f"sqlite:///{tmp_path / 'env.db'}")
        
        engine = create_database_engine()
        try:
            store = SqlDocumentStore(engine, create_tables=True)
            store.set("post-1", b"one")
        finally:
            engine.dispose()
        
        assert (tmp_path / "env.db").exists()
    
    def test_rows_are_timestamped(self, sqlite_engine, sql_store):
        sql_store.set("post-1", b"one")
        
        with transaction_scope(get_session_factory(sqlite_engine)) as session:
            record = session.get(DocumentRecord, "post-1")
            assert record.created_at is not None
            assert record.updated_at is not None


# ============================================================
# TEST: TRANSACTIONS
# ============================================================

class TestTransactionScope:
    """Commit on success, roll back and re-raise on failure."""
    
    def test_commit(self, sqlite_engine):
        create_all_tables(sqlite_engine)
        factory = get_session_factory(sqlite_engine)
        
        with transaction_scope(factory) as session:
            session.add(DocumentRecord(key="k", value=b"v"))
        
        with transaction_scope(factory) as session:
            assert session.get(DocumentRecord, "k").value == b"v"
    
    def test_rollback(self, sqlite_engine):
        create_all_tables(sqlite_engine)
        factory = get_session_factory(sqlite_engine)
        
        with pytest.raises(RuntimeError):
            with transaction_scope(factory) as session:
                session.add(DocumentRecord(key="k", value=b"v"))
                session.flush()
                raise RuntimeError("boom")
        
        with transaction_scope(factory) as session:
            assert session.get(DocumentRecord, "k") is None
