"""Utility helpers to push notification changes to realtime subscribers."""

from __future__ import annotations

import logging
from typing import Any

from pawmatch.domain.entities import Notification

from .feed import ChangeEvent, ChangeEventType, NotificationChangeFeed

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Wrap committed notification rows into change events and publish them."""

    def __init__(self, feed: NotificationChangeFeed) -> None:
        self._feed = feed

    @property
    def feed(self) -> NotificationChangeFeed:
        return self._feed

    def dispatch(self, event_type: ChangeEventType, notification: Notification) -> None:
        """Publish ``notification`` to the channels of its recipient.

        Realtime delivery is best-effort, so failures are logged and never
        reach the code that committed the row.
        """

        try:
            delivered = self._feed.publish(ChangeEvent(type=event_type, notification=notification))
        except Exception:
            logger.exception(
                "Failed to publish %s event for notification %s", event_type.value, notification.id
            )
            return
        logger.debug(
            "Published %s event for notification %s to %d channel(s)",
            event_type.value,
            notification.id,
            delivered,
        )

    @staticmethod
    def _serialize(notification: Notification) -> dict[str, Any]:
        return {
            "id": notification.id,
            "user_id": notification.user_id,
            "type": notification.type,
            "sender_id": notification.sender_id,
            "content": notification.content,
            "reference_id": notification.reference_id,
            "data": notification.data or {},
            "is_read": notification.is_read,
            "created_at": notification.created_at.isoformat()
            if notification.created_at
            else None,
        }


notification_feed = NotificationChangeFeed()
notification_publisher = NotificationPublisher(notification_feed)


def dispatch_notification_event(
    event_type: ChangeEventType, notification: Notification
) -> None:
    """Public helper that delegates to the shared publisher instance."""

    notification_publisher.dispatch(event_type, notification)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return NotificationPublisher._serialize(notification)


__all__ = [
    "NotificationPublisher",
    "dispatch_notification_event",
    "notification_feed",
    "notification_publisher",
    "serialize_notification",
]
