"""Read-state and dismissal operations on a user's notifications."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from pawmatch.domain.entities import Notification
from pawmatch.infrastructure.notifications import (
    ChangeEventType,
    dispatch_notification_event,
)
from pawmatch.infrastructure.repositories import NotificationRepository

from .dedup import cleanup_duplicate_notifications

logger = logging.getLogger(__name__)


def mark_notifications_as_read(
    session: Session, *, user_id: str, notification_ids: Iterable[int]
) -> Sequence[Notification]:
    """Mark the given notifications of ``user_id`` as read."""

    changed = NotificationRepository(session).mark_as_read(notification_ids, user_id=user_id)
    for notification in changed:
        dispatch_notification_event(ChangeEventType.UPDATE, notification)
    return changed


def mark_all_notifications_as_read(session: Session, *, user_id: str) -> Sequence[Notification]:
    """Mark every unread notification of ``user_id`` as read.

    This never deletes anything; removal only happens through dismissal,
    deduplication and the admin cleanup.
    """

    changed = NotificationRepository(session).mark_all_as_read(user_id)
    for notification in changed:
        dispatch_notification_event(ChangeEventType.UPDATE, notification)
    return changed


def delete_notification(session: Session, *, user_id: str, notification_id: int) -> None:
    """Dismiss one notification owned by ``user_id``."""

    if not NotificationRepository(session).delete(notification_id, user_id=user_id):
        raise ValueError("Notification not found")


def count_unread_notifications(session: Session, *, user_id: str) -> int:
    """Unread badge count, taken after duplicates are collapsed."""

    result = cleanup_duplicate_notifications(session, user_id)
    if not result.success:
        logger.warning("Counting unread notifications without cleanup: %s", result.error)
    return NotificationRepository(session).count_unread(user_id)


__all__ = [
    "count_unread_notifications",
    "delete_notification",
    "mark_all_notifications_as_read",
    "mark_notifications_as_read",
]
