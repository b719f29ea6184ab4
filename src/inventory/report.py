"""Status snapshot and the chat-formatted inventory report."""

from datetime import datetime
from typing import Callable

from shared_types import ItemStatus

from .catalog import Catalog
from .forecast import RestockPrediction, predict
from .models import InventoryDocument, ItemRecord

MARKERS = {
    ItemStatus.STOCKED: "✅",
    ItemStatus.LOW: "⚠️",
    ItemStatus.OUT: "❌",
    None: "❔",
}

EMPTY_REPORT = (
    "No inventory data yet. Start by telling me what you restocked or what's running low!"
)


def _amount(record: ItemRecord | None) -> str:
    if record is None or record.quantity is None:
        return ""
    qty = int(record.quantity) if float(record.quantity).is_integer() else record.quantity
    return f" ({qty} {record.unit})" if record.unit else f" ({qty})"


class StatusReporter:
    def __init__(
        self,
        catalog: Catalog,
        clock: Callable[[], datetime] = datetime.now,
        recent_count: int = 3,
    ):
        self.catalog = catalog
        self.clock = clock
        self.recent_count = recent_count

    def snapshot(self, doc: InventoryDocument) -> dict[str, list[str]]:
        """Every catalog item bucketed by current status; untracked items are 'unknown'."""
        buckets: dict[str, list[str]] = {"out": [], "low": [], "stocked": [], "unknown": []}
        for item in self.catalog.items:
            record = doc.items.get(item)
            key = str(record.status) if record else "unknown"
            buckets[key].append(item)
        return buckets

    def predictions(self, doc: InventoryDocument) -> list[RestockPrediction]:
        """Due items, urgent first, then longest since restock."""
        found = predict(doc, self.catalog.items, self.clock())
        return sorted(found, key=lambda p: (not p.urgent, -p.days_since_last_restock))

    def render(self, doc: InventoryDocument, max_predictions: int = 5) -> str:
        if not doc.items and not doc.history:
            return EMPTY_REPORT

        snap = self.snapshot(doc)
        sections = []

        if snap["out"]:
            lines = [f"❌ **OUT OF STOCK** ({len(snap['out'])}):"]
            lines += [f"• {item}{_amount(doc.items.get(item))}" for item in snap["out"]]
            sections.append("\n".join(lines))
        if snap["low"]:
            lines = [f"⚠️ **RUNNING LOW** ({len(snap['low'])}):"]
            lines += [f"• {item}{_amount(doc.items.get(item))}" for item in snap["low"]]
            sections.append("\n".join(lines))
        if not snap["out"] and not snap["low"]:
            sections.append("✅ **All tracked items are stocked!**")

        due = self.predictions(doc)[:max_predictions]
        if due:
            lines = ["📊 **Restock due** (based on history):"]
            for p in due:
                marker = "🔴" if p.urgent else "🟡"
                lines.append(
                    f"{marker} {p.item}: usually every ~{p.avg_interval_days} days "
                    f"({p.days_since_last_restock} days since last)"
                )
            sections.append("\n".join(lines))

        for category, items in self.catalog.categories.items():
            lines = [f"**{category}**"]
            for item in items:
                record = doc.items.get(item)
                marker = MARKERS[record.status if record else None]
                lines.append(f"{marker} {item}{_amount(record)}")
            sections.append("\n".join(lines))

        recent = doc.history[-self.recent_count :][::-1] if self.recent_count else []
        if recent:
            lines = ["🕑 **Recent updates:**"]
            for entry in recent:
                when = entry.timestamp.astimezone().strftime("%b %d %H:%M")
                lines.append(f"• {entry.item} → {entry.action} ({when})")
            sections.append("\n".join(lines))

        sections.append("✅ stocked · ⚠️ low · ❌ out · ❔ not tracked yet")
        return "\n\n".join(sections)
