"""CLI command modules."""

from .inventory import clarifications, message, predict, status
from .orders import order_id, preorder, wholesale
from .reminders import reminders

__all__ = [
    "message",
    "status",
    "predict",
    "clarifications",
    "reminders",
    "order_id",
    "preorder",
    "wholesale",
]
