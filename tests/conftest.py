"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from pantryplan.database import Base
from pantryplan.models import legacy_metadata
from pantryplan.pantry.engine import PantryEngine
from pantryplan.pantry.storage import SqlPantryStore

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# SQLite Test Database Fixtures
# =============================================================================


def _memory_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


@pytest.fixture(scope="function")
def test_db_engine():
    """In-memory database with the current (structured quantity) schema."""
    engine = _memory_engine()
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def legacy_db_engine():
    """In-memory database whose pantry table predates the quantity/unit columns."""
    engine = _memory_engine()
    legacy_metadata.create_all(engine)

    yield engine

    legacy_metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    with Session(test_db_engine) as session:
        yield session


@pytest.fixture(scope="function")
def legacy_session(legacy_db_engine):
    """Create a session on the legacy-schema database."""
    with Session(legacy_db_engine) as session:
        yield session


# =============================================================================
# Pantry Fixtures
# =============================================================================


@pytest.fixture
def pantry_store(test_session):
    """Row store on the structured schema."""
    return SqlPantryStore.for_session(test_session)


@pytest.fixture
def legacy_pantry_store(legacy_session):
    """Row store on the text-only schema."""
    return SqlPantryStore.for_session(legacy_session)


@pytest.fixture
def pantry_engine(pantry_store):
    """Pantry engine on the structured schema."""
    return PantryEngine(pantry_store, decimals=4, id_prefix="pan")


@pytest.fixture
def legacy_pantry_engine(legacy_pantry_store):
    """Pantry engine on the text-only schema."""
    return PantryEngine(legacy_pantry_store, decimals=4, id_prefix="pan")


def _row_inserter(store: SqlPantryStore):
    def add_row(
        item_id: str,
        name: str,
        quantity_text: str,
        quantity_number: float | None = None,
        unit: str | None = None,
        name_lower: str | None = "",
    ) -> None:
        values = {
            "item_id": item_id,
            "name": name,
            # "" means derive from name; None leaves the column empty like pre-upgrade rows
            "name_lower": name.strip().lower() if name_lower == "" else name_lower,
            "quantity_text": quantity_text,
            "store_id": "",
            "notes": "",
            "updated_at": datetime(2024, 1, 1),
        }
        if store.capability.structured_quantity:
            values["quantity_number"] = quantity_number
            values["unit"] = unit
        store.session.execute(insert(store.table).values(**values))

    return add_row


@pytest.fixture
def add_pantry_row(pantry_store):
    """Insert a pantry row directly, bypassing the engine."""
    return _row_inserter(pantry_store)


@pytest.fixture
def add_legacy_pantry_row(legacy_pantry_store):
    """Insert a text-only pantry row directly."""
    return _row_inserter(legacy_pantry_store)
