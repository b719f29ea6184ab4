"""Durable key-value store for whole JSON documents.

Two backends: a SQLite table (default) and one JSON file per key. Both are
read-modify-write at document granularity; callers serialize writers.
"""

import json
import os
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from contextlib import closing
from datetime import datetime
from pathlib import Path

import structlog
from pydantic import ValidationError

from db import wal_connect

from .catalog import Catalog
from .models import InventoryDocument, PendingActionsDocument

logger = structlog.get_logger()

INVENTORY_KEY = "inventory"
PENDING_KEY = "pending_actions"


class StoreError(Exception):
    """Document could not be read or durably written."""


class DocumentStore(ABC):
    """Whole-document persistence keyed by name."""

    @abstractmethod
    def load(self, key: str) -> dict | None:
        """Return the stored document, or None if the key was never written."""
        ...

    @abstractmethod
    def save(self, key: str, doc: dict) -> None:
        """Replace the stored document. Raises StoreError on failure."""
        ...


class SQLiteDocumentStore(DocumentStore):
    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()
        self._init_db()

    def _init_db(self):
        try:
            with closing(wal_connect(self.db_path)) as conn, conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS documents (
                        key TEXT PRIMARY KEY,
                        body TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open document store {self.db_path}: {e}") from e

    def load(self, key: str) -> dict | None:
        try:
            with closing(wal_connect(self.db_path)) as conn:
                row = conn.execute("SELECT body FROM documents WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to load '{key}': {e}") from e
        if not row:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt document '{key}': {e}") from e

    def save(self, key: str, doc: dict) -> None:
        try:
            body = json.dumps(doc)
            with closing(wal_connect(self.db_path)) as conn, conn:
                conn.execute(
                    """INSERT INTO documents (key, body, updated_at) VALUES (?, ?, ?)
                       ON CONFLICT(key) DO UPDATE SET body = excluded.body,
                                                      updated_at = excluded.updated_at""",
                    (key, body, datetime.now().isoformat()),
                )
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.error("store.save_failed", key=key, error=str(e))
            raise StoreError(f"Failed to save '{key}': {e}") from e


class JsonFileDocumentStore(DocumentStore):
    """One pretty-printed ``<key>.json`` per document, replaced atomically."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> dict | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to load {path}: {e}") from e

    def save(self, key: str, doc: dict) -> None:
        path = self._path(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error("store.save_failed", key=key, path=str(path), error=str(e))
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Failed to save {path}: {e}") from e


def create_store(backend: str, data_dir: str | Path) -> DocumentStore:
    data_dir = Path(data_dir).expanduser()
    if backend == "sqlite":
        return SQLiteDocumentStore(data_dir / "bakebot.db")
    if backend == "json":
        return JsonFileDocumentStore(data_dir)
    raise StoreError(f"Unknown store backend: {backend}. Use: sqlite, json")


class InventoryRepository:
    """Typed access to the two inventory documents."""

    def __init__(self, store: DocumentStore, catalog: Catalog):
        self.store = store
        self.catalog = catalog

    def load_inventory(self) -> InventoryDocument:
        data = self.store.load(INVENTORY_KEY)
        if data is None:
            return InventoryDocument(categories=dict(self.catalog.categories))
        try:
            doc = InventoryDocument.from_dict(data)
        except ValidationError as e:
            raise StoreError(f"Inventory document is invalid: {e}") from e
        if not doc.categories:
            doc.categories = dict(self.catalog.categories)
        return doc

    def save_inventory(self, doc: InventoryDocument) -> None:
        self.store.save(INVENTORY_KEY, doc.to_dict())

    def load_pending(self) -> PendingActionsDocument:
        data = self.store.load(PENDING_KEY)
        if data is None:
            return PendingActionsDocument()
        try:
            return PendingActionsDocument.from_dict(data)
        except ValidationError as e:
            raise StoreError(f"Pending-actions document is invalid: {e}") from e

    def save_pending(self, doc: PendingActionsDocument) -> None:
        self.store.save(PENDING_KEY, doc.to_dict())
