"""Realtime notification helpers for the infrastructure layer."""

from .feed import (
    ChangeEvent,
    ChangeEventType,
    FeedChannel,
    NotificationChangeFeed,
    SubscriptionStatus,
)
from .publisher import (
    NotificationPublisher,
    dispatch_notification_event,
    notification_feed,
    notification_publisher,
    serialize_notification,
)
from .subscription import NotificationSubscription

__all__ = [
    "ChangeEvent",
    "ChangeEventType",
    "FeedChannel",
    "NotificationChangeFeed",
    "SubscriptionStatus",
    "NotificationPublisher",
    "notification_feed",
    "notification_publisher",
    "dispatch_notification_event",
    "serialize_notification",
    "NotificationSubscription",
]
