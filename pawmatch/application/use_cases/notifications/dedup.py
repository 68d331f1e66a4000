"""Collapse notifications that describe the same logical event."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.domain.entities import Notification, NotificationKey
from pawmatch.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupResult:
    """Outcome of a deduplication pass."""

    success: bool
    count: int = 0
    error: str | None = None


def find_duplicate_ids(notifications: Iterable[Notification]) -> list[int]:
    """Return the ids to delete so one notification per key survives.

    ``notifications`` must be ordered newest first; the first member of each
    group is kept.
    """

    seen: set[NotificationKey] = set()
    duplicates: list[int] = []
    for notification in notifications:
        key = notification.key
        if key in seen:
            if notification.id is not None:
                duplicates.append(notification.id)
            continue
        seen.add(key)
    return duplicates


def cleanup_duplicate_notifications(session: Session, user_id: str | None) -> CleanupResult:
    """Delete every duplicate notification of ``user_id`` in one batch."""

    if not user_id:
        return CleanupResult(success=False, error="user_id is required")

    repository = NotificationRepository(session)
    try:
        notifications = repository.list_for_user(user_id, limit=None)
        duplicate_ids = find_duplicate_ids(notifications)
        if not duplicate_ids:
            return CleanupResult(success=True, count=0)
        removed = repository.delete_many(duplicate_ids)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to clean up duplicate notifications for user %s", user_id)
        return CleanupResult(success=False, error=str(exc))

    logger.info("Removed %d duplicate notification(s) for user %s", removed, user_id)
    return CleanupResult(success=True, count=removed)


def list_notifications(
    session: Session, user_id: str, *, limit: int | None = 50
) -> Sequence[Notification]:
    """Return the newest notifications of ``user_id`` after a dedup pass."""

    result = cleanup_duplicate_notifications(session, user_id)
    if not result.success:
        logger.warning("Listing notifications without cleanup: %s", result.error)
    return NotificationRepository(session).list_for_user(user_id, limit=limit)


__all__ = [
    "CleanupResult",
    "cleanup_duplicate_notifications",
    "find_duplicate_ids",
    "list_notifications",
]
