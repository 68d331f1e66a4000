"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the identifiers without duplicates, keeping their order."""

        return list(dict.fromkeys(self.ids))


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    type: str
    sender_id: str | None = None
    content: str
    reference_id: int | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None

    @field_validator("data", mode="before")
    @classmethod
    def _default_data(cls, value: Any) -> Any:
        return {} if value is None else value


class UnreadCountRead(BaseModel):
    count: int


class ReadAllResponse(BaseModel):
    updated: int


class CleanupResultRead(BaseModel):
    """Outcome of a duplicate cleanup pass."""

    model_config = ConfigDict(from_attributes=True)

    success: bool
    count: int = 0
    error: str | None = None


class MessageNotificationRequest(BaseModel):
    message_text: str | None = Field(
        default=None, description="Only used for logging; never stored in the notification"
    )


class NotificationResult(BaseModel):
    """Whether a best-effort notification was created."""

    notified: bool
    notification: NotificationRead | None = None


__all__ = [
    "CleanupResultRead",
    "MessageNotificationRequest",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "NotificationResult",
    "ReadAllResponse",
    "UnreadCountRead",
]
