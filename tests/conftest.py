"""Shared test fixtures for bakebot."""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from inventory.catalog import default_catalog  # noqa: E402
from inventory.engine import ReconciliationEngine  # noqa: E402
from inventory.oracle import StructuredIntent  # noqa: E402
from inventory.store import InventoryRepository, SQLiteDocumentStore  # noqa: E402


class FakeClock:
    """Settable clock for engine/reporter tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 10, 9, 30))


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def doc_store(tmp_path):
    return SQLiteDocumentStore(tmp_path / "bakebot.db")


@pytest.fixture
def repository(doc_store, catalog):
    return InventoryRepository(doc_store, catalog)


@pytest.fixture
def engine(repository, catalog, clock):
    return ReconciliationEngine(repository, catalog, clock=clock)


@pytest.fixture
def mock_oracle():
    return MagicMock()


def make_intent(intent="update", updates=None, clarifications=None, reminder=None, reply=""):
    """Build a StructuredIntent the way the oracle's JSON would describe it."""
    return StructuredIntent.model_validate(
        {
            "intent": intent,
            "updates": updates or [],
            "clarifications": clarifications or [],
            "reminder": reminder,
            "reply": reply,
        }
    )
