"""Message orchestration: oracle -> reconciliation -> reply text."""

import asyncio
import threading

import structlog

from shared_types import IntentKind, ItemStatus

from .engine import ReconciliationEngine, ReconciliationError, ReconciliationResult
from .models import PendingClarification, Reminder
from .oracle import IntentOracle, StructuredIntent
from .report import StatusReporter

logger = structlog.get_logger()

SAVE_FAILED_REPLY = "❌ Sorry, I couldn't save that update. Please try again in a moment."
LOAD_FAILED_REPLY = "❌ Sorry, I couldn't read the inventory right now."

_CONFIRMATIONS = [
    (ItemStatus.STOCKED, "✅", "RESTOCKED"),
    (ItemStatus.LOW, "⚠️", "marked as LOW"),
    (ItemStatus.OUT, "❌", "marked as OUT"),
]


def describe_clarification(pending: PendingClarification | None) -> str | None:
    """Context line handed to the oracle while a question is open."""
    if pending is None:
        return None
    return (
        f'Earlier you asked this user: "{pending.question}" about "{pending.raw_phrase}". '
        f"Options: {', '.join(pending.options)}. If the message answers it, return an "
        f"update for the chosen item."
    )


def merge_question(reply: str, question: str) -> str:
    """Fold the clarification question into the oracle's reply unless it already asks one."""
    reply = (reply or "").strip()
    if reply.endswith("?"):
        return reply
    return f"{reply} {question}".strip()


def compose_reply(
    intent: StructuredIntent,
    result: ReconciliationResult,
    open_clarification: PendingClarification | None = None,
) -> str | None:
    parts = []

    for status, emoji, label in _CONFIRMATIONS:
        names = result.updated_by_status.get(status)
        if names:
            parts.append(f"{emoji} **{label}:** {', '.join(names)}")

    if result.all_failed:
        parts.append(
            f"❌ Sorry, I couldn't find {', '.join(result.failed)} in inventory. Check spelling?"
        )
    elif result.failed:
        parts.append(f"❓ Couldn't find {', '.join(result.failed)}. Check spelling?")

    if result.reminder:
        parts.append(f"⏰ Got it, I'll remind you {result.reminder.when}: {result.reminder.text}")

    question = result.clarification or open_clarification
    if question:
        parts.append(merge_question(intent.reply, question.question))
    elif intent.reply and (intent.intent in (IntentKind.CHAT, IntentKind.QUESTION) or not parts):
        parts.append(intent.reply.strip())

    return "\n".join(parts) if parts else None


def format_reminders(reminders: list[Reminder]) -> list[str]:
    return [f"⏰ Reminder for {r.requester_id} ({r.when}): {r.text}" for r in reminders]


class InventoryAssistant:
    """Entry point for one chat message.

    ``process_message`` is the blocking path; ``handle_message`` is for event
    loops and only suspends on the oracle call and the serialized store work.
    """

    def __init__(
        self,
        oracle: IntentOracle,
        engine: ReconciliationEngine,
        reporter: StatusReporter,
    ):
        self.oracle = oracle
        self.engine = engine
        self.reporter = reporter
        self._lock = threading.Lock()
        self._async_lock = asyncio.Lock()

    def process_message(self, text: str, requester_id: str) -> str | None:
        pending = self._pending(requester_id)
        intent = self.oracle.classify(text, requester_id, describe_clarification(pending))
        with self._lock:
            return self._respond(intent, requester_id, pending)

    async def handle_message(self, text: str, requester_id: str) -> str | None:
        pending = await asyncio.to_thread(self._pending, requester_id)
        intent = await asyncio.to_thread(
            self.oracle.classify, text, requester_id, describe_clarification(pending)
        )
        async with self._async_lock:
            return await asyncio.to_thread(self._respond, intent, requester_id, pending)

    def status_report(self) -> str:
        return self.reporter.render(self.engine.load_inventory())

    def _pending(self, requester_id: str) -> PendingClarification | None:
        try:
            return self.engine.pending_clarification(requester_id)
        except ReconciliationError as e:
            logger.warning("assistant.pending_lookup_failed", requester=requester_id, error=str(e))
            return None

    def _respond(
        self,
        intent: StructuredIntent | None,
        requester_id: str,
        pending: PendingClarification | None,
    ) -> str | None:
        if intent is None or intent.intent == IntentKind.IGNORE:
            logger.debug("assistant.no_reply", requester=requester_id)
            return None

        if intent.intent == IntentKind.STATUS:
            try:
                return self.status_report()
            except ReconciliationError as e:
                logger.error("assistant.status_failed", error=str(e))
                return LOAD_FAILED_REPLY

        try:
            result = self.engine.apply_intent(intent, requester_id)
        except ReconciliationError as e:
            logger.error("assistant.reconcile_failed", requester=requester_id, error=str(e))
            return SAVE_FAILED_REPLY

        still_open = None
        if (
            pending
            and result.resolved_clarification is None
            and intent.intent == IntentKind.QUESTION
        ):
            still_open = pending
        return compose_reply(intent, result, still_open)
