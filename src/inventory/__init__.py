"""Supply inventory — catalog, reconciliation, reporting and pending actions."""

from .assistant import InventoryAssistant
from .catalog import AliasEntry, Catalog, CatalogError, default_catalog
from .engine import ReconciliationEngine, ReconciliationError, ReconciliationResult
from .forecast import RestockPrediction, predict
from .models import (
    HistoryEntry,
    InventoryDocument,
    ItemRecord,
    PendingActionsDocument,
    PendingClarification,
    Reminder,
)
from .oracle import IntentOracle, LLMIntentOracle, StructuredIntent
from .report import StatusReporter
from .store import (
    DocumentStore,
    InventoryRepository,
    JsonFileDocumentStore,
    SQLiteDocumentStore,
    StoreError,
    create_store,
)

__all__ = [
    "AliasEntry",
    "Catalog",
    "CatalogError",
    "default_catalog",
    "DocumentStore",
    "SQLiteDocumentStore",
    "JsonFileDocumentStore",
    "InventoryRepository",
    "StoreError",
    "create_store",
    "HistoryEntry",
    "InventoryDocument",
    "ItemRecord",
    "PendingActionsDocument",
    "PendingClarification",
    "Reminder",
    "IntentOracle",
    "LLMIntentOracle",
    "StructuredIntent",
    "ReconciliationEngine",
    "ReconciliationError",
    "ReconciliationResult",
    "RestockPrediction",
    "predict",
    "StatusReporter",
    "InventoryAssistant",
]
