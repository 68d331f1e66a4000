"""Admin diagnostics for notifications with broken references."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.domain.entities import Notification, NotificationCounts, NotificationType
from pawmatch.infrastructure.repositories import (
    ConversationRepository,
    NotificationRepository,
    PetRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found on a notification field."""

    field: str
    issue: str
    value: Any = None


@dataclass
class NotificationValidation:
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues


@dataclass
class InvalidNotification:
    notification: Notification
    validation: NotificationValidation


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of an admin deletion request."""

    success: bool
    count: int = 0
    error: str | None = None


def validate_notification(
    notification: Notification,
    *,
    pet_exists: Callable[[int], bool],
    conversation_exists: Callable[[int], bool],
) -> NotificationValidation:
    """Check the references carried by ``notification``."""

    validation = NotificationValidation()
    issues = validation.issues

    if not notification.user_id:
        issues.append(ValidationIssue("user_id", "missing recipient", notification.user_id))

    notification_type = NotificationType.parse(notification.type)
    if notification_type is None:
        issues.append(ValidationIssue("type", "unknown notification type", notification.type))
        return validation

    data = notification.data or {}
    reference_id = notification.reference_id

    if notification_type is NotificationType.MESSAGE:
        conversation_id = _as_int(data.get("conversation_id"))
        if reference_id is None and conversation_id is None:
            issues.append(
                ValidationIssue("reference_id", "message notification without a conversation")
            )
        if reference_id is not None and not conversation_exists(reference_id):
            issues.append(
                ValidationIssue("reference_id", "conversation does not exist", reference_id)
            )
        if "conversation_id" in data:
            if conversation_id is None:
                issues.append(
                    ValidationIssue(
                        "data.conversation_id", "invalid conversation id", data.get("conversation_id")
                    )
                )
            elif not conversation_exists(conversation_id):
                issues.append(
                    ValidationIssue(
                        "data.conversation_id", "conversation does not exist", conversation_id
                    )
                )
            elif reference_id is not None and reference_id != conversation_id:
                issues.append(
                    ValidationIssue(
                        "data.conversation_id",
                        "does not match reference_id",
                        conversation_id,
                    )
                )
        return validation

    if reference_id is not None and not pet_exists(reference_id):
        issues.append(ValidationIssue("reference_id", "pet does not exist", reference_id))
    if "pet_id" in data:
        pet_id = _as_int(data.get("pet_id"))
        if pet_id is None:
            issues.append(ValidationIssue("data.pet_id", "invalid pet id", data.get("pet_id")))
        elif not pet_exists(pet_id):
            issues.append(ValidationIssue("data.pet_id", "pet does not exist", pet_id))
    return validation


def find_invalid_notifications(
    session: Session, *, limit: int | None = 500
) -> list[InvalidNotification]:
    """Scan the newest notifications and return those with issues."""

    notifications = NotificationRepository(session).list_all(limit=limit)
    return _collect_invalid(session, notifications)


def summarize_notifications(session: Session, *, limit: int | None = 500) -> NotificationCounts:
    """Return totals per type plus the invalid count for the admin scan."""

    notifications = NotificationRepository(session).list_all(limit=limit)
    counts = NotificationCounts(total=len(notifications))
    for notification in notifications:
        counts.types[notification.type] = counts.types.get(notification.type, 0) + 1
    counts.invalid = len(_collect_invalid(session, notifications))
    return counts


def delete_invalid_notifications(
    session: Session, notification_ids: Iterable[int] | None
) -> DeletionResult:
    """Delete the notifications selected by an administrator."""

    ids = list(dict.fromkeys(notification_ids or []))
    if not ids:
        return DeletionResult(success=True, count=0)
    try:
        removed = NotificationRepository(session).delete_many(ids)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Failed to delete %d invalid notification(s)", len(ids))
        return DeletionResult(success=False, count=0, error=str(exc))
    logger.info("Deleted %d invalid notification(s)", removed)
    return DeletionResult(success=True, count=removed)


def _collect_invalid(
    session: Session, notifications: Iterable[Notification]
) -> list[InvalidNotification]:
    pets = PetRepository(session)
    conversations = ConversationRepository(session)
    pet_cache: dict[int, bool] = {}
    conversation_cache: dict[int, bool] = {}

    def pet_exists(pet_id: int) -> bool:
        if pet_id not in pet_cache:
            pet_cache[pet_id] = pets.exists(pet_id)
        return pet_cache[pet_id]

    def conversation_exists(conversation_id: int) -> bool:
        if conversation_id not in conversation_cache:
            conversation_cache[conversation_id] = conversations.exists(conversation_id)
        return conversation_cache[conversation_id]

    invalid: list[InvalidNotification] = []
    for notification in notifications:
        validation = validate_notification(
            notification,
            pet_exists=pet_exists,
            conversation_exists=conversation_exists,
        )
        if not validation.is_valid:
            invalid.append(InvalidNotification(notification=notification, validation=validation))
    return invalid


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


__all__ = [
    "DeletionResult",
    "InvalidNotification",
    "NotificationValidation",
    "ValidationIssue",
    "delete_invalid_notifications",
    "find_invalid_notifications",
    "summarize_notifications",
    "validate_notification",
]
