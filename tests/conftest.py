"""Pytest configuration and fixtures for snapshot transfer tests."""

import pytest
from sqlalchemy.orm import sessionmaker

from zenpire_inventory import models  # noqa: F401
from zenpire_inventory.models.base import Base
from zenpire_inventory.services.database import create_database_engine
from zenpire_inventory.services.record_store import InMemoryRecordStore
from zenpire_inventory.utils.config import reset_config

from .fixtures.transfer_fixtures import SAMPLE_REFERENCES, build_sample_tables


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from ZENPIRE_INVENTORY_* settings of the host."""
    for name in (
        "ZENPIRE_INVENTORY_ENV",
        "ZENPIRE_INVENTORY_DATABASE_URL",
        "ZENPIRE_INVENTORY_EXPORT_WORKERS",
        "ZENPIRE_INVENTORY_ATOMIC_IMPORT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean in-memory SQLite database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database (foreign keys enforced)
    2. Creates all tables
    3. Points the global session factory at it
    4. Disposes of the engine after the test completes
    """
    engine = create_database_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    import zenpire_inventory.services.database as db_module

    original_get_session_factory = db_module.get_session_factory
    original_get_engine = db_module.get_engine
    db_module.get_session_factory = lambda: session_factory
    db_module.get_engine = lambda force_recreate=False: engine

    yield session_factory

    db_module.get_session_factory = original_get_session_factory
    db_module.get_engine = original_get_engine
    engine.dispose()


@pytest.fixture
def sample_tables():
    """Complete business dataset for the default registry."""
    return build_sample_tables()


@pytest.fixture
def memory_store(sample_tables):
    """In-memory store loaded with the sample dataset, foreign keys enforced."""
    return InMemoryRecordStore(sample_tables, references=SAMPLE_REFERENCES)


@pytest.fixture
def empty_memory_store():
    """Empty in-memory store with foreign keys enforced."""
    return InMemoryRecordStore(references=SAMPLE_REFERENCES)
