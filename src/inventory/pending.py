"""Pending clarifications and reminders, scoped per requester."""

from datetime import datetime, timedelta

import structlog

from shared_types import ReminderWhen

from .models import PendingActionsDocument, PendingClarification, Reminder

logger = structlog.get_logger()

TONIGHT_HOUR = 20


class PendingActions:
    """Operations over a loaded PendingActionsDocument. Caller persists."""

    def __init__(self, doc: PendingActionsDocument):
        self.doc = doc

    # --- clarifications ---

    def add_clarification(
        self,
        requester_id: str,
        raw_phrase: str,
        options: list[str],
        question: str,
        now: datetime | None = None,
    ) -> PendingClarification:
        """Add a clarification, replacing any open one for the same requester."""
        self.resolve_clarification(requester_id)
        pending = PendingClarification(
            requester_id=requester_id,
            raw_phrase=raw_phrase,
            options=list(options),
            question=question,
            created_at=now or datetime.now(),
        )
        self.doc.clarifications.append(pending)
        return pending

    def resolve_clarification(self, requester_id: str) -> PendingClarification | None:
        """Remove the requester's open clarification. No-op if there is none."""
        for i, pending in enumerate(self.doc.clarifications):
            if pending.requester_id == requester_id:
                return self.doc.clarifications.pop(i)
        return None

    def get_clarification(self, requester_id: str) -> PendingClarification | None:
        for pending in self.doc.clarifications:
            if pending.requester_id == requester_id:
                return pending
        return None

    # --- reminders ---

    def add_reminder(
        self, requester_id: str, text: str, when: str, now: datetime | None = None
    ) -> Reminder:
        reminder = Reminder(
            requester_id=requester_id,
            text=text,
            when=(when or "").strip() or ReminderWhen.TONIGHT.value,
            created_at=now or datetime.now(),
        )
        self.doc.reminders.append(reminder)
        return reminder

    def due_reminders(self, now: datetime, tonight_hour: int = TONIGHT_HOUR) -> list[Reminder]:
        """Unresolved reminders whose slot has arrived.

        Free-text times ("at 3pm", "friday") are never matched here; they stay
        open until someone resolves them by hand.
        """
        due = []
        for reminder in self.doc.reminders:
            if reminder.resolved:
                continue
            slot = reminder.when.strip().lower()
            if slot == ReminderWhen.TONIGHT and now.hour >= tonight_hour:
                due.append(reminder)
            elif slot == ReminderWhen.TOMORROW and (
                now - reminder.created_at >= timedelta(days=1)
            ):
                due.append(reminder)
        return due

    def mark_resolved(self, reminder_ids: list[str]) -> int:
        wanted = set(reminder_ids)
        count = 0
        for reminder in self.doc.reminders:
            if reminder.id in wanted and not reminder.resolved:
                reminder.resolved = True
                count += 1
        return count

    def open_reminders(self, requester_id: str | None = None) -> list[Reminder]:
        return [
            r
            for r in self.doc.reminders
            if not r.resolved and (requester_id is None or r.requester_id == requester_id)
        ]

    def prune_resolved(self) -> int:
        before = len(self.doc.reminders)
        self.doc.reminders = [r for r in self.doc.reminders if not r.resolved]
        removed = before - len(self.doc.reminders)
        if removed:
            logger.debug("pending.reminders_pruned", removed=removed)
        return removed
