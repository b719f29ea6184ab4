"""Shared enums for bakebot."""

from enum import StrEnum


class ItemStatus(StrEnum):
    STOCKED = "stocked"
    LOW = "low"
    OUT = "out"


class IntentKind(StrEnum):
    UPDATE = "update"
    STATUS = "status"
    REMINDER = "reminder"
    QUESTION = "question"
    CHAT = "chat"
    IGNORE = "ignore"


class ReminderWhen(StrEnum):
    """Reminder slots the due-check understands. Anything else is free text."""

    TONIGHT = "tonight"
    TOMORROW = "tomorrow"


class AliasPolicy(StrEnum):
    EXPAND = "expand"  # update every listed item
    ASK = "ask"  # ask the requester which one


class Kitchen(StrEnum):
    TOVA = "TOVA"
    LUMIERE = "LUMIERE"
    BOTH = "BOTH"
