"""Order id generation with a per-day counter that survives restarts."""

import threading
from datetime import date, datetime
from typing import Callable

import structlog
from pydantic import BaseModel, Field, ValidationError

from inventory.store import DocumentStore

logger = structlog.get_logger()

ORDERS_KEY = "orders"

PREFIXES = {
    "preorder": "PRE",
    "wholesale": "WHO",
}


class OrderCounterState(BaseModel):
    """Next sequence number per order kind, valid for ``day`` only."""

    day: date
    counters: dict[str, int] = Field(default_factory=dict)

    def roll_to(self, today: date) -> bool:
        """Reset counters at the local-day boundary. Returns True if reset."""
        if self.day == today:
            return False
        self.day = today
        self.counters = {}
        return True


class OrderIdGenerator:
    """Issues ids like ``PRE-1018-001``; numbering restarts each local day."""

    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()

    def _load(self, today: date) -> OrderCounterState:
        data = self.store.load(ORDERS_KEY)
        if data is None:
            return OrderCounterState(day=today)
        try:
            return OrderCounterState.model_validate(data)
        except ValidationError as e:
            logger.warning("orders.counter_state_invalid", error=str(e)[:200])
            return OrderCounterState(day=today)

    def next_id(self, kind: str) -> str:
        prefix = PREFIXES.get(kind)
        if prefix is None:
            raise ValueError(f"Unknown order kind: {kind}. Use: {', '.join(PREFIXES)}")

        with self._lock:
            now = self.clock()
            state = self._load(now.date())
            if state.roll_to(now.date()):
                logger.info("orders.counters_reset", day=now.date().isoformat())
            number = state.counters.get(kind, 1)
            state.counters[kind] = number + 1
            self.store.save(ORDERS_KEY, state.model_dump(mode="json"))

        order_id = f"{prefix}-{now:%m%d}-{number:03d}"
        logger.info("orders.id_issued", kind=kind, order_id=order_id)
        return order_id

