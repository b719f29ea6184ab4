"""Persisted document models for inventory state and pending actions.

Attribute names are snake_case; the stored JSON uses the camelCase keys the
bot has always written, so existing inventory files keep loading.
"""

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field

from shared_types import ItemStatus


def _local_naive(value: datetime) -> datetime:
    """Stored timestamps are naive local time; older files carry UTC "Z" stamps."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


LocalDateTime = Annotated[datetime, AfterValidator(_local_naive)]


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict):
        return cls.model_validate(data)


class ItemRecord(_Document):
    status: ItemStatus
    quantity: Optional[float] = None
    unit: Optional[str] = None
    note: Optional[str] = None
    last_updated_at: LocalDateTime = Field(
        default_factory=datetime.now,
        alias="lastUpdatedAt",
        validation_alias=AliasChoices("lastUpdatedAt", "last_updated_at", "updatedAt"),
    )
    last_mentioned_at: Optional[LocalDateTime] = Field(
        default=None,
        alias="lastMentionedAt",
        validation_alias=AliasChoices("lastMentionedAt", "last_mentioned_at"),
    )
    previous_status: Optional[ItemStatus] = Field(
        default=None,
        alias="previousStatus",
        validation_alias=AliasChoices("previousStatus", "previous_status"),
    )


class HistoryEntry(_Document):
    model_config = ConfigDict(frozen=True)

    item: str
    action: ItemStatus
    quantity: Optional[float] = None
    unit: Optional[str] = None
    timestamp: LocalDateTime


class InventoryDocument(_Document):
    categories: dict[str, list[str]] = Field(default_factory=dict)
    items: dict[str, ItemRecord] = Field(default_factory=dict)
    history: list[HistoryEntry] = Field(default_factory=list)

    def truncate_history(self, limit: int) -> int:
        """Drop the oldest entries beyond ``limit``. Returns how many were dropped."""
        overflow = len(self.history) - limit
        if overflow <= 0:
            return 0
        self.history = self.history[overflow:]
        return overflow


class PendingClarification(_Document):
    requester_id: str = Field(
        alias="requesterId", validation_alias=AliasChoices("requesterId", "requester_id")
    )
    raw_phrase: str = Field(
        alias="rawPhrase", validation_alias=AliasChoices("rawPhrase", "raw_phrase")
    )
    options: list[str] = Field(default_factory=list)
    question: str = ""
    created_at: LocalDateTime = Field(
        default_factory=datetime.now,
        alias="createdAt",
        validation_alias=AliasChoices("createdAt", "created_at"),
    )


class Reminder(_Document):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    requester_id: str = Field(
        alias="requesterId", validation_alias=AliasChoices("requesterId", "requester_id")
    )
    text: str
    when: str  # "tonight", "tomorrow" or free-form time text
    created_at: LocalDateTime = Field(
        default_factory=datetime.now,
        alias="createdAt",
        validation_alias=AliasChoices("createdAt", "created_at"),
    )
    resolved: bool = False


class PendingActionsDocument(_Document):
    clarifications: list[PendingClarification] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
