"""Intent oracle — turns a free-text chat message into a structured intent.

The core only depends on ``IntentOracle.classify``. ``LLMIntentOracle`` is the
production implementation backed by an LLM provider; anything returning a
``StructuredIntent`` (a rules engine, a test double) can stand in for it.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Optional

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from cli.retry import llm_retry
from shared_types import IntentKind, ItemStatus, ReminderWhen

from .catalog import Catalog

logger = structlog.get_logger()

_STATUS_SYNONYMS = {
    "restock": ItemStatus.STOCKED,
    "restocked": ItemStatus.STOCKED,
    "in_stock": ItemStatus.STOCKED,
    "full": ItemStatus.STOCKED,
    "running_low": ItemStatus.LOW,
    "empty": ItemStatus.OUT,
    "out_of_stock": ItemStatus.OUT,
}


class ProposedUpdate(BaseModel):
    item: str
    status: ItemStatus
    qty: Optional[float] = None
    unit: Optional[str] = None
    note: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalise_status(cls, v):
        if isinstance(v, str):
            key = v.strip().lower().replace(" ", "_")
            return _STATUS_SYNONYMS.get(key, key)
        return v


class ProposedClarification(BaseModel):
    raw: str
    options: list[str] = Field(default_factory=list)
    question: str = ""


class ProposedReminder(BaseModel):
    text: str = ""
    when: str = ReminderWhen.TONIGHT.value

    @field_validator("text", mode="before")
    @classmethod
    def none_text(cls, v):
        return v or ""

    @field_validator("when", mode="before")
    @classmethod
    def default_when(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return ReminderWhen.TONIGHT.value
        return v


class StructuredIntent(BaseModel):
    intent: IntentKind = IntentKind.CHAT
    updates: list[ProposedUpdate] = Field(default_factory=list)
    clarifications: list[ProposedClarification] = Field(default_factory=list)
    reminder: Optional[ProposedReminder] = None
    reply: str = ""

    @field_validator("intent", mode="before")
    @classmethod
    def normalise_intent(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v in ("clarification", "answer", "clarification_answer"):
                return IntentKind.QUESTION
        return v

    @field_validator("updates", mode="before")
    @classmethod
    def drop_bad_updates(cls, v):
        """Keep the usable updates; one malformed entry should not sink the rest."""
        if not isinstance(v, list):
            return []
        kept = []
        for raw in v:
            try:
                kept.append(ProposedUpdate.model_validate(raw))
            except ValidationError:
                logger.debug("oracle.update_dropped", update=str(raw)[:200])
        return kept

    @field_validator("clarifications", mode="before")
    @classmethod
    def drop_bad_clarifications(cls, v):
        if not isinstance(v, list):
            return []
        kept = []
        for raw in v:
            try:
                kept.append(ProposedClarification.model_validate(raw))
            except ValidationError:
                logger.debug("oracle.clarification_dropped", clarification=str(raw)[:200])
        return kept

    @field_validator("reminder", mode="before")
    @classmethod
    def drop_bad_reminder(cls, v):
        if v is None:
            return None
        try:
            return ProposedReminder.model_validate(v)
        except ValidationError:
            logger.debug("oracle.reminder_dropped", reminder=str(v)[:200])
            return None

    @field_validator("reply", mode="before")
    @classmethod
    def none_reply(cls, v):
        return v or ""


def extract_json(text: str) -> dict | None:
    """Pull the JSON object out of an LLM reply that may carry fences or prose."""
    if not text:
        return None
    candidate = text.strip()

    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", candidate)
    if fenced:
        candidate = fenced.group(1)

    try:
        data = json.loads(candidate)
        return data if isinstance(data, dict) else None
    except json.JSONDecodeError:
        pass

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        data = json.loads(candidate[start : end + 1])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def parse_intent(text: str) -> StructuredIntent | None:
    data = extract_json(text)
    if data is None:
        logger.warning("oracle.parse_failed", response=(text or "")[:200])
        return None
    try:
        return StructuredIntent.model_validate(data)
    except ValidationError as e:
        logger.warning("oracle.invalid_intent", error=str(e)[:300])
        return None


class IntentOracle(ABC):
    @abstractmethod
    def classify(
        self, text: str, requester_id: str, context: str | None = None
    ) -> StructuredIntent | None:
        """Return a structured suggestion, or None when nothing was understood."""
        ...


_SYSTEM_PROMPT = """You are the inventory assistant for a bakery/cafe called Lumière Patisserie.
Staff post short chat messages about supplies. Turn each message into JSON.

Tracked items by category:
{catalog}

Known shorthand:
{aliases}

Intents:
- "update": supplies were restocked, are running low, or are out
- "status": the user wants to see what we have / what we need
- "reminder": the user asks to be reminded of something later
- "question": a question, or an answer to a clarification you asked earlier
- "chat": friendly conversation addressed to you
- "ignore": not for you (staff talking to each other, off-topic)

Statuses: "stocked", "low", "out".

Respond with ONLY this JSON object:
{{
  "intent": "update|status|reminder|question|chat|ignore",
  "updates": [{{"item": "exact item name", "status": "stocked|low|out", "qty": null, "unit": null, "note": null}}],
  "clarifications": [{{"raw": "phrase used", "options": ["item a", "item b"], "question": "short question"}}],
  "reminder": {{"text": "what to remind", "when": "tonight|tomorrow|<time text>"}} or null,
  "reply": "short friendly reply"
}}

Rules:
- Use exact item names from the list whenever the message is specific.
- "all milks", "fruits" and similar umbrella words mean every item in the group.
- If a word could mean several items (cups, bags, sugar) and the message does not say which,
  put the word itself in "updates" so it can be clarified, and do not guess.
- Only fill "qty"/"unit" when a number is stated."""


class LLMIntentOracle(IntentOracle):
    """Intent oracle backed by an LLM provider."""

    def __init__(self, catalog: Catalog, provider=None, max_tokens: int = 600, max_attempts: int = 3):
        self.catalog = catalog
        self._provider = provider
        self.max_tokens = max_tokens
        self.max_attempts = max_attempts

    def _get_provider(self):
        if self._provider:
            return self._provider
        from llm.factory import create_llm_provider

        self._provider = create_llm_provider()
        return self._provider

    def system_prompt(self) -> str:
        catalog = "\n".join(
            f"- {cat}: {', '.join(items)}" for cat, items in self.catalog.categories.items()
        )
        aliases = "\n".join(
            f'- "{entry.phrase}" -> {", ".join(entry.items)}'
            + (" (ask which one)" if entry.policy == "ask" and len(entry.items) > 1 else "")
            for entry in self.catalog.aliases.values()
        )
        return _SYSTEM_PROMPT.format(catalog=catalog, aliases=aliases or "- (none)")

    def classify(
        self, text: str, requester_id: str, context: str | None = None
    ) -> StructuredIntent | None:
        if not text or not text.strip():
            return None

        prompt = text.strip()[:2000]
        if context:
            prompt = f"Context: {context}\n\nMessage: {prompt}"

        try:
            provider = self._get_provider()
            raw = self._generate(provider, prompt)
        except Exception as e:
            logger.warning("oracle.call_failed", requester=requester_id, error=str(e))
            return None

        intent = parse_intent(raw)
        if intent:
            logger.debug(
                "oracle.classified",
                requester=requester_id,
                intent=str(intent.intent),
                updates=len(intent.updates),
            )
        return intent

    def _generate(self, provider, prompt: str) -> str:
        @llm_retry(max_attempts=self.max_attempts)
        def call():
            return provider.generate(
                messages=[{"role": "user", "content": prompt}],
                system=self.system_prompt(),
                max_tokens=self.max_tokens,
            )

        return call()
