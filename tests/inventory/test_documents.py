"""Tests for persisted document models and both store backends."""

import json
from datetime import datetime, timezone

import pytest

from inventory.catalog import default_catalog
from inventory.models import (
    HistoryEntry,
    InventoryDocument,
    ItemRecord,
    PendingActionsDocument,
    PendingClarification,
    Reminder,
)
from inventory.store import (
    InventoryRepository,
    JsonFileDocumentStore,
    SQLiteDocumentStore,
    StoreError,
    create_store,
)
from shared_types import ItemStatus

T0 = datetime(2026, 3, 1, 8, 15, 30)


def _inventory():
    return InventoryDocument(
        categories={"Milk": ["Whole milk", "Oat milk"]},
        items={
            "Oat milk": ItemRecord(
                status=ItemStatus.LOW,
                quantity=2,
                unit="cartons",
                note="the barista brand",
                last_updated_at=T0,
                last_mentioned_at=T0,
                previous_status=ItemStatus.STOCKED,
            )
        },
        history=[
            HistoryEntry(item="Oat milk", action=ItemStatus.STOCKED, timestamp=T0),
            HistoryEntry(
                item="Oat milk", action=ItemStatus.LOW, quantity=2, unit="cartons", timestamp=T0
            ),
        ],
    )


class TestSerialization:
    def test_camel_case_keys(self):
        data = _inventory().to_dict()
        record = data["items"]["Oat milk"]
        assert record["lastUpdatedAt"] == "2026-03-01T08:15:30"
        assert record["previousStatus"] == "stocked"
        assert "last_updated_at" not in record

    def test_legacy_updated_at_loads(self):
        doc = InventoryDocument.from_dict(
            {
                "categories": {"Milk": ["Oat milk"]},
                "items": {"Oat milk": {"status": "out", "updatedAt": "2025-12-01T10:00:00"}},
                "history": [],
            }
        )
        assert doc.items["Oat milk"].last_updated_at == datetime(2025, 12, 1, 10, 0)
        assert doc.items["Oat milk"].quantity is None

    def test_pending_round_trip(self):
        doc = PendingActionsDocument(
            clarifications=[
                PendingClarification(
                    requester_id="u1", raw_phrase="cups", options=["a", "b"], question="?", created_at=T0
                )
            ],
            reminders=[Reminder(requester_id="u1", text="order flour", when="tomorrow", created_at=T0)],
        )
        data = json.loads(json.dumps(doc.to_dict()))
        assert data["clarifications"][0]["requesterId"] == "u1"
        assert PendingActionsDocument.from_dict(data) == doc

    def test_invalid_status_rejected(self):
        with pytest.raises(ValueError):
            ItemRecord(status="plenty")

    def test_truncate_history_keeps_newest_in_order(self):
        doc = InventoryDocument(
            history=[
                HistoryEntry(item=f"i{n}", action=ItemStatus.LOW, timestamp=T0) for n in range(8)
            ]
        )
        assert doc.truncate_history(5) == 3
        assert [h.item for h in doc.history] == ["i3", "i4", "i5", "i6", "i7"]
        assert doc.truncate_history(5) == 0


@pytest.fixture(params=["sqlite", "json"])
def any_store(request, tmp_path):
    return create_store(request.param, tmp_path / "data")


class TestStores:
    def test_missing_key_is_none(self, any_store):
        assert any_store.load("nothing") is None

    def test_save_and_load(self, any_store):
        any_store.save("doc", {"a": [1, 2], "b": "ü"})
        assert any_store.load("doc") == {"a": [1, 2], "b": "ü"}

    def test_overwrite(self, any_store):
        any_store.save("doc", {"v": 1})
        any_store.save("doc", {"v": 2})
        assert any_store.load("doc") == {"v": 2}

    def test_unserializable_raises_store_error(self, any_store):
        with pytest.raises(StoreError):
            any_store.save("doc", {"when": object()})

    def test_inventory_round_trip(self, any_store):
        repo = InventoryRepository(any_store, default_catalog())
        original = _inventory()
        repo.save_inventory(original)
        assert repo.load_inventory() == original

    def test_first_access_is_empty_with_catalog_categories(self, any_store):
        catalog = default_catalog()
        repo = InventoryRepository(any_store, catalog)
        doc = repo.load_inventory()
        assert doc.items == {}
        assert doc.history == []
        assert doc.categories == catalog.categories
        assert repo.load_pending() == PendingActionsDocument()


class TestBackendDetails:
    def test_json_store_writes_readable_file(self, tmp_path):
        store = JsonFileDocumentStore(tmp_path)
        store.save("inventory", {"items": {}})
        assert json.loads((tmp_path / "inventory.json").read_text()) == {"items": {}}
        assert not list(tmp_path.glob(".inventory.*.tmp"))

    def test_json_store_corrupt_file(self, tmp_path):
        (tmp_path / "inventory.json").write_text("{not json")
        with pytest.raises(StoreError):
            JsonFileDocumentStore(tmp_path).load("inventory")

    def test_sqlite_store_persists_across_instances(self, tmp_path):
        SQLiteDocumentStore(tmp_path / "x.db").save("k", {"v": 1})
        assert SQLiteDocumentStore(tmp_path / "x.db").load("k") == {"v": 1}

    def test_unknown_backend(self, tmp_path):
        with pytest.raises(StoreError, match="Unknown store backend"):
            create_store("redis", tmp_path)

    def test_invalid_inventory_document(self, tmp_path):
        store = JsonFileDocumentStore(tmp_path)
        store.save("inventory", {"items": {"Oat milk": {"status": "plenty"}}})
        with pytest.raises(StoreError, match="invalid"):
            InventoryRepository(store, default_catalog()).load_inventory()


class TestLegacyTimestamps:
    def test_utc_stamps_become_local_naive(self):
        doc = InventoryDocument.from_dict(
            {
                "items": {
                    "Skim milk": {
                        "status": "stocked",
                        "updatedAt": "2026-03-01T10:00:00.000Z",
                        "lastMentionedAt": "2026-03-01T10:00:00.000Z",
                    }
                },
                "history": [
                    {"item": "Skim milk", "action": "stocked", "timestamp": "2026-03-01T10:00:00.000Z"}
                ],
            }
        )
        expected = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        record = doc.items["Skim milk"]
        assert record.last_updated_at == expected
        assert record.last_mentioned_at == expected
        assert doc.history[0].timestamp == expected
        assert doc.history[0].timestamp.tzinfo is None

    def test_pending_utc_stamps(self):
        doc = PendingActionsDocument.from_dict(
            {
                "clarifications": [
                    {
                        "requesterId": "u1",
                        "rawPhrase": "cups",
                        "options": ["a", "b"],
                        "createdAt": "2026-03-01T10:00:00Z",
                    }
                ],
                "reminders": [
                    {"requesterId": "u1", "text": "x", "when": "tonight", "createdAt": "2026-03-01T10:00:00Z"}
                ],
            }
        )
        assert doc.clarifications[0].created_at.tzinfo is None
        assert doc.reminders[0].created_at.tzinfo is None

    def test_naive_stamps_unchanged(self):
        entry = HistoryEntry(item="Flour", action=ItemStatus.LOW, timestamp=T0)
        assert entry.timestamp == T0
