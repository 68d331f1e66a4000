"""Domain entities describing user notifications and their subjects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union


class NotificationType(str, Enum):
    """Kinds of events a user can be notified about."""

    MATCH = "match"
    MESSAGE = "message"
    INTEREST = "interest"

    @classmethod
    def parse(cls, value: "NotificationType | str | None") -> "NotificationType | None":
        """Return the member for ``value`` or ``None`` when it is unknown."""

        if value is None:
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass
class Notification:
    """Event notice delivered to a specific recipient."""

    id: int | None
    user_id: str
    type: str
    sender_id: str | None = None
    content: str | None = None
    reference_id: int | None = None
    data: dict[str, Any] | None = None
    is_read: bool = False
    created_at: datetime | None = None

    @property
    def logical_reference(self) -> Any:
        """Return the identifier notifications of the same event are grouped by.

        Message notifications are grouped by the conversation stored in
        ``data`` because the same conversation may be referenced from rows
        whose ``reference_id`` was nulled at creation time.
        """

        if self.type == NotificationType.MESSAGE.value and self.data:
            conversation_id = self.data.get("conversation_id")
            if conversation_id is not None:
                return _normalize_reference(conversation_id)
        return _normalize_reference(self.reference_id)

    @property
    def key(self) -> "NotificationKey":
        return NotificationKey(
            user_id=self.user_id,
            type=self.type,
            sender_id=self.sender_id,
            logical_reference=self.logical_reference,
        )


@dataclass(frozen=True)
class NotificationKey:
    """Composite identity of a logical notification event."""

    user_id: str
    type: str
    sender_id: str | None
    logical_reference: Any


@dataclass(frozen=True)
class MatchSubject:
    """A mutual match with the pet identified by ``pet_id``."""

    pet_id: int

    type = NotificationType.MATCH

    @property
    def reference_id(self) -> int:
        return self.pet_id

    def payload(self) -> dict[str, Any]:
        return {"pet_id": self.pet_id}


@dataclass(frozen=True)
class MessageSubject:
    """A new message inside the direct conversation ``conversation_id``."""

    conversation_id: int

    type = NotificationType.MESSAGE

    @property
    def reference_id(self) -> int:
        return self.conversation_id

    def payload(self) -> dict[str, Any]:
        return {"conversation_id": self.conversation_id}


@dataclass(frozen=True)
class InterestSubject:
    """Someone expressed interest in the recipient's pet ``pet_id``."""

    pet_id: int

    type = NotificationType.INTEREST

    @property
    def reference_id(self) -> int:
        return self.pet_id

    def payload(self) -> dict[str, Any]:
        return {"pet_id": self.pet_id}


NotificationSubject = Union[MatchSubject, MessageSubject, InterestSubject]


@dataclass
class NotificationCounts:
    """Aggregated figures for the admin notification scan."""

    total: int = 0
    invalid: int = 0
    types: dict[str, int] = field(default_factory=dict)


def _normalize_reference(value: Any) -> Any:
    # JSON payloads may carry numeric ids as strings.
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


__all__ = [
    "InterestSubject",
    "MatchSubject",
    "MessageSubject",
    "Notification",
    "NotificationCounts",
    "NotificationKey",
    "NotificationSubject",
    "NotificationType",
]
