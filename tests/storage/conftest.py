"""Shared fixtures for storage tests."""

import pytest

from core.config import StoreConfig
from storage.database import create_database_engine
from storage.memory_store import MemoryDocumentStore
from storage.sql_store import SqlDocumentStore


@pytest.fixture
def sqlite_engine(tmp_path):
    engine = create_database_engine(StoreConfig(database_url=f"sqlite:///{tmp_path / 'store.db'}"))
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine):
    return SqlDocumentStore(sqlite_engine, create_tables=True)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every DocumentStore implementation."""
    if request.param == "memory":
        return MemoryDocumentStore()
    return request.getfixturevalue("sql_store")
