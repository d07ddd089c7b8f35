"""
Shared pytest fixtures and configuration for enum-handler tests.

This module provides:
- Settings and structlog cleanup for test isolation
- An in-memory SQLite engine with the test models created
- A populated session (users with statuses and roles, books with conditions)
"""

import sys
from pathlib import Path

import pytest
import structlog

# Ensure enum_handler package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from enum_handler import EnumBase, clear_settings_cache, create_enum_engine, enum_session_factory
from tests._support.models import Book, Dish, Preference, User, book_tags


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        # Anything that touches a database counts as integration
        if "orm" in test_path.parts or "database" in item.fixturenames:
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings():
    """Reload settings from the environment for every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any configure_logging() a test (or the CLI callback) performed."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    eng = create_enum_engine("sqlite:///:memory:")
    EnumBase.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    """EnumSession bound to the in-memory engine."""
    with enum_session_factory(engine)() as sess:
        yield sess


@pytest.fixture
def database(session):
    """Session populated with a small, known data set.

    * 3 active customers (alice, bob, carol)
    * 2 suspended suppliers (dave, erin)
    * 1 terminated customer (frank)
    * alice owns three books: mint, mint, used
    * two preferences (one per context) and two dishes
    * Dune is tagged "classic"
    """
    users = [
        User(name="alice", status="active", role="customer"),
        User(name="bob", status="active", role="customer"),
        User(name="carol", status="active", role="customer"),
        User(name="dave", status="suspended", role="supplier"),
        User(name="erin", status="suspended", role="supplier"),
        User(name="frank", status="terminated", role="customer"),
    ]
    session.add_all(users)
    users[0].books = [
        Book(title="Dune", condition="mint"),
        Book(title="Emma", condition="mint"),
        Book(title="Ulysses", condition="used"),
    ]
    session.add_all(
        [
            Preference(owner_type="User", owner_id=1, value="email"),
            Preference(owner_type="Book", owner_id=1, value="monthly"),
            Dish(food_type="egg", cooking_method="fried"),
            Dish(food_type="beef", cooking_method="roasted"),
        ]
    )
    session.flush()
    session.execute(book_tags.insert(), [{"book_id": users[0].books[0].id, "tag": "classic"}])
    session.commit()
    return session
