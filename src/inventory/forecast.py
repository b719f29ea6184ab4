"""Restock-interval predictions from the inventory history.

A plain moving average over the gaps between "stocked" events. No seasonality,
no outlier rejection: one unusually long gap skews the interval.
"""

import math
from dataclasses import dataclass
from datetime import datetime

from shared_types import ItemStatus

from .models import InventoryDocument

SECONDS_PER_DAY = 86400


@dataclass
class RestockPrediction:
    item: str
    avg_interval_days: int
    days_since_last_restock: int
    urgent: bool


def _round_days(days: float) -> int:
    """Round half up, so 9.5 days reads as 10."""
    return math.floor(days + 0.5)


def predict(doc: InventoryDocument, items: list[str], now: datetime) -> list[RestockPrediction]:
    """Items due for restocking (within a day of their usual interval, or overdue)."""
    restocks: dict[str, list[datetime]] = {}
    for entry in doc.history:
        if entry.action == ItemStatus.STOCKED:
            restocks.setdefault(entry.item, []).append(entry.timestamp)

    predictions = []
    for item in items:
        stamps = sorted(restocks.get(item, []))
        if len(stamps) < 2:
            continue

        gaps = [
            (later - earlier).total_seconds() / SECONDS_PER_DAY
            for earlier, later in zip(stamps, stamps[1:])
        ]
        avg_days = _round_days(sum(gaps) / len(gaps))
        since = _round_days((now - stamps[-1]).total_seconds() / SECONDS_PER_DAY)

        if since >= avg_days - 1:
            predictions.append(
                RestockPrediction(
                    item=item,
                    avg_interval_days=avg_days,
                    days_since_last_restock=since,
                    urgent=since >= avg_days,
                )
            )
    return predictions
