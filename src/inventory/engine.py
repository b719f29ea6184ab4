"""Reconciliation engine — applies oracle intents to the inventory documents."""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

import structlog

from shared_types import ItemStatus

from .catalog import Catalog, Resolution
from .models import (
    HistoryEntry,
    InventoryDocument,
    ItemRecord,
    PendingActionsDocument,
    PendingClarification,
    Reminder,
)
from .oracle import ProposedUpdate, StructuredIntent
from .pending import TONIGHT_HOUR, PendingActions
from .store import InventoryRepository, StoreError

logger = structlog.get_logger()

HISTORY_LIMIT = 500


class ReconciliationError(Exception):
    """The documents could not be read or durably written; nothing was applied."""


@dataclass
class ReconciliationResult:
    updated: list[str] = field(default_factory=list)
    updated_by_status: dict[ItemStatus, list[str]] = field(default_factory=dict)
    failed: list[str] = field(default_factory=list)
    clarification: PendingClarification | None = None
    resolved_clarification: PendingClarification | None = None
    reminder: Reminder | None = None
    attempted: int = 0

    @property
    def all_failed(self) -> bool:
        """Updates were proposed but none landed and nothing needs asking."""
        return self.attempted > 0 and not self.updated and self.clarification is None


def clarification_question(phrase: str, options: list[str]) -> str:
    if len(options) == 1:
        return f"Did you mean {options[0]}?"
    listed = ", ".join(options[:-1]) + f" or {options[-1]}"
    return f"Which {phrase} do you mean: {listed}?"


class ReconciliationEngine:
    """Owns every read-modify-write of the inventory and pending-actions documents.

    All public operations run under one lock, so concurrent callers never
    interleave their load/save cycles.
    """

    def __init__(
        self,
        repository: InventoryRepository,
        catalog: Catalog,
        clock: Callable[[], datetime] = datetime.now,
        history_limit: int = HISTORY_LIMIT,
        tonight_hour: int = TONIGHT_HOUR,
    ):
        self.repository = repository
        self.catalog = catalog
        self.clock = clock
        self.history_limit = history_limit
        self.tonight_hour = tonight_hour
        self._lock = threading.RLock()

    def apply_intent(self, intent: StructuredIntent, requester_id: str) -> ReconciliationResult:
        with self._lock:
            now = self.clock()
            inventory, pending_doc = self._load()
            pending = PendingActions(pending_doc)
            result = ReconciliationResult(attempted=len(intent.updates))

            resolutions = [(u, self.catalog.resolve(u.item)) for u in intent.updates]

            # Any resolvable update from this requester answers their open question,
            # whether or not it names one of the offered options.
            if any(r.matched for _, r in resolutions):
                result.resolved_clarification = pending.resolve_clarification(requester_id)
                if result.resolved_clarification:
                    logger.info(
                        "inventory.clarification_resolved",
                        requester=requester_id,
                        phrase=result.resolved_clarification.raw_phrase,
                    )

            ambiguous: list[Resolution] = []
            for update, resolution in resolutions:
                if resolution.matched:
                    for name in resolution.items:
                        self._apply_update(inventory, name, update, now)
                        result.updated.append(name)
                        result.updated_by_status.setdefault(update.status, []).append(name)
                elif resolution.ambiguous:
                    ambiguous.append(resolution)
                else:
                    result.failed.append(update.item)

            for resolution in ambiguous:
                result.clarification = pending.add_clarification(
                    requester_id,
                    resolution.phrase,
                    resolution.items,
                    clarification_question(resolution.phrase, resolution.items),
                    now=now,
                )

            for proposed in intent.clarifications:
                options = self._canonical_options(proposed.options)
                if not options:
                    logger.info("inventory.clarification_skipped", phrase=proposed.raw)
                    continue
                result.clarification = pending.add_clarification(
                    requester_id,
                    proposed.raw,
                    options,
                    proposed.question or clarification_question(proposed.raw, options),
                    now=now,
                )

            if intent.reminder and intent.reminder.text.strip():
                result.reminder = pending.add_reminder(
                    requester_id, intent.reminder.text.strip(), intent.reminder.when, now=now
                )

            dropped = inventory.truncate_history(self.history_limit)
            if dropped:
                logger.debug("inventory.history_truncated", dropped=dropped)

            self._save(inventory, pending_doc)

        logger.info(
            "inventory.intent_applied",
            requester=requester_id,
            intent=str(intent.intent),
            updated=result.updated,
            failed=result.failed,
            clarification=result.clarification.raw_phrase if result.clarification else None,
        )
        return result

    def _apply_update(
        self, inventory: InventoryDocument, name: str, update: ProposedUpdate, now: datetime
    ) -> ItemRecord:
        record = inventory.items.get(name)
        if record is None:
            record = ItemRecord(
                status=update.status,
                quantity=update.qty,
                unit=update.unit,
                note=update.note,
                last_updated_at=now,
                last_mentioned_at=now,
            )
            inventory.items[name] = record
        else:
            record.previous_status = record.status
            record.status = update.status
            if update.qty is not None:
                record.quantity = update.qty
            if update.unit is not None:
                record.unit = update.unit
            if update.note is not None:
                record.note = update.note
            record.last_updated_at = now
            record.last_mentioned_at = now

        inventory.history.append(
            HistoryEntry(
                item=name,
                action=update.status,
                quantity=update.qty,
                unit=update.unit,
                timestamp=now,
            )
        )
        logger.debug("inventory.item_updated", item=name, status=str(update.status))
        return record

    def _canonical_options(self, options: list[str]) -> list[str]:
        """Map oracle-suggested options onto catalog names, keeping order and dropping repeats."""
        canonical = []
        for option in options:
            if not option.strip():
                continue
            resolution = self.catalog.resolve(option)
            names = resolution.items if len(resolution.items) == 1 else [option]
            for name in names:
                if name not in canonical:
                    canonical.append(name)
        return canonical

    # --- pending actions ---

    def pending_clarification(self, requester_id: str) -> PendingClarification | None:
        with self._lock:
            return PendingActions(self._load_pending()).get_clarification(requester_id)

    def add_pending_clarification(
        self, requester_id: str, raw_phrase: str, options: list[str], question: str
    ) -> PendingClarification:
        with self._lock:
            doc = self._load_pending()
            pending = PendingActions(doc).add_clarification(
                requester_id, raw_phrase, options, question, now=self.clock()
            )
            self._save_pending(doc)
            return pending

    def resolve_clarification(self, requester_id: str) -> PendingClarification | None:
        with self._lock:
            doc = self._load_pending()
            removed = PendingActions(doc).resolve_clarification(requester_id)
            if removed:
                self._save_pending(doc)
            return removed

    def due_reminders(self, now: datetime | None = None) -> list[Reminder]:
        """Return reminders that are due and drop them from the pending document."""
        with self._lock:
            doc = self._load_pending()
            actions = PendingActions(doc)
            due = actions.due_reminders(now or self.clock(), tonight_hour=self.tonight_hour)
            if not due:
                return []
            actions.mark_resolved([r.id for r in due])
            actions.prune_resolved()
            self._save_pending(doc)
        logger.info("inventory.reminders_due", count=len(due))
        return due

    def open_reminders(self, requester_id: str | None = None) -> list[Reminder]:
        with self._lock:
            return PendingActions(self._load_pending()).open_reminders(requester_id)

    def load_inventory(self) -> InventoryDocument:
        with self._lock:
            try:
                return self.repository.load_inventory()
            except StoreError as e:
                raise ReconciliationError(str(e)) from e

    # --- persistence ---

    def _load(self) -> tuple[InventoryDocument, PendingActionsDocument]:
        try:
            return self.repository.load_inventory(), self.repository.load_pending()
        except StoreError as e:
            logger.error("inventory.load_failed", error=str(e))
            raise ReconciliationError(str(e)) from e

    def _save(self, inventory: InventoryDocument, pending_doc: PendingActionsDocument) -> None:
        try:
            self.repository.save_inventory(inventory)
            self.repository.save_pending(pending_doc)
        except StoreError as e:
            logger.error("inventory.save_failed", error=str(e))
            raise ReconciliationError(str(e)) from e

    def _load_pending(self) -> PendingActionsDocument:
        try:
            return self.repository.load_pending()
        except StoreError as e:
            raise ReconciliationError(str(e)) from e

    def _save_pending(self, doc: PendingActionsDocument) -> None:
        try:
            self.repository.save_pending(doc)
        except StoreError as e:
            logger.error("inventory.save_failed", error=str(e))
            raise ReconciliationError(str(e)) from e
