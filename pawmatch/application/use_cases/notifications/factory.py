"""Validated creation of notifications with supersession of stale rows."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.domain.entities import (
    InterestSubject,
    MatchSubject,
    MessageSubject,
    Notification,
    NotificationKey,
    NotificationSubject,
    NotificationType,
)
from pawmatch.infrastructure.notifications import (
    ChangeEventType,
    dispatch_notification_event,
)
from pawmatch.infrastructure.repositories import (
    ConversationRepository,
    NotificationRepository,
    PetRepository,
)

logger = logging.getLogger(__name__)

MATCH_CONTENT = "You matched with a new pet!"
MESSAGE_CONTENT = "You have a new message"
INTEREST_CONTENT = "Someone is interested in your pet"
DEFAULT_CONTENT = "You have a new notification"

_CONTENT_BY_TYPE = {
    NotificationType.MATCH: MATCH_CONTENT,
    NotificationType.MESSAGE: MESSAGE_CONTENT,
    NotificationType.INTEREST: INTEREST_CONTENT,
}


class InvalidNotificationArgument(ValueError):
    """Raised when a notification is requested without its mandatory fields."""


def default_content(notification_type: str) -> str:
    """Return the text shown for ``notification_type`` when ``content`` is empty."""

    parsed = NotificationType.parse(notification_type)
    if parsed is None:
        return DEFAULT_CONTENT
    return _CONTENT_BY_TYPE[parsed]


def create_notification(
    session: Session,
    *,
    recipient_id: str | None,
    type: NotificationType | str | None,
    sender_id: str | None = None,
    content: str | None = None,
    reference_id: int | None = None,
    data: dict[str, Any] | None = None,
) -> Notification | None:
    """Persist a notification for ``recipient_id`` and return it.

    ``None`` means no notification was created; the reason has been logged.
    Callers treat notifications as best-effort and continue their own flow.
    An unresolvable ``reference_id`` is stored as ``None`` instead of
    rejecting the write, and any earlier notification for the same logical
    event is deleted first so the latest event wins.
    """

    try:
        notification_type = _require_arguments(recipient_id, type)
    except InvalidNotificationArgument as exc:
        logger.error("Notification not created: %s", exc)
        return None

    validated_reference = _validate_reference(session, notification_type, reference_id)
    notification = Notification(
        id=None,
        user_id=str(recipient_id),
        type=notification_type.value,
        sender_id=sender_id or None,
        content=content or default_content(notification_type.value),
        reference_id=validated_reference,
        data=dict(data) if data else None,
        is_read=False,
    )

    repository = NotificationRepository(session)
    _supersede(session, repository, notification.key)
    try:
        saved = repository.create(notification)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Could not create %s notification for user %s",
            notification.type,
            notification.user_id,
        )
        return None

    logger.info(
        "Created %s notification %s for user %s", saved.type, saved.id, saved.user_id
    )
    dispatch_notification_event(ChangeEventType.INSERT, saved)
    return saved


def notify(
    session: Session,
    *,
    recipient_id: str,
    sender_id: str | None,
    subject: NotificationSubject,
    content: str | None = None,
) -> Notification | None:
    """Create the notification described by ``subject``."""

    return create_notification(
        session,
        recipient_id=recipient_id,
        type=subject.type,
        sender_id=sender_id,
        content=content or _CONTENT_BY_TYPE[subject.type],
        reference_id=subject.reference_id,
        data=subject.payload(),
    )


def create_match_notification(
    session: Session, recipient_id: str, sender_id: str, pet_id: int
) -> Notification | None:
    """Tell ``recipient_id`` they matched with ``sender_id``'s pet ``pet_id``."""

    return notify(
        session,
        recipient_id=recipient_id,
        sender_id=sender_id,
        subject=MatchSubject(pet_id=pet_id),
        content=MATCH_CONTENT,
    )


def create_message_notification(
    session: Session,
    recipient_id: str,
    sender_id: str,
    conversation_id: int,
    message_text: str | None = None,
) -> Notification | None:
    """Tell ``recipient_id`` a message arrived in ``conversation_id``.

    ``message_text`` is accepted for the caller's convenience but is never
    stored: message notifications always carry the generic text.
    """

    return notify(
        session,
        recipient_id=recipient_id,
        sender_id=sender_id,
        subject=MessageSubject(conversation_id=conversation_id),
        content=MESSAGE_CONTENT,
    )


def create_interest_notification(
    session: Session, recipient_id: str, sender_id: str, pet_id: int
) -> Notification | None:
    """Tell the owner ``recipient_id`` that ``sender_id`` likes pet ``pet_id``."""

    return notify(
        session,
        recipient_id=recipient_id,
        sender_id=sender_id,
        subject=InterestSubject(pet_id=pet_id),
        content=INTEREST_CONTENT,
    )


def _require_arguments(
    recipient_id: str | None, notification_type: NotificationType | str | None
) -> NotificationType:
    if not recipient_id:
        raise InvalidNotificationArgument("recipient_id is required")
    if not notification_type:
        raise InvalidNotificationArgument("type is required")
    parsed = NotificationType.parse(notification_type)
    if parsed is None:
        raise InvalidNotificationArgument(f"unknown notification type {notification_type!r}")
    return parsed


def _validate_reference(
    session: Session, notification_type: NotificationType, reference_id: int | None
) -> int | None:
    if reference_id is None:
        return None

    try:
        if notification_type is NotificationType.MESSAGE:
            exists = ConversationRepository(session).exists(reference_id)
        else:
            exists = PetRepository(session).exists(reference_id)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Could not validate reference %s for %s notification",
            reference_id,
            notification_type.value,
        )
        return None

    if not exists:
        logger.warning(
            "Referenced %s %s not found; storing notification without reference",
            "conversation" if notification_type is NotificationType.MESSAGE else "pet",
            reference_id,
        )
        return None
    return reference_id


def _supersede(
    session: Session, repository: NotificationRepository, key: NotificationKey
) -> None:
    try:
        stale = repository.list_by_key(key)
        removed = repository.delete_many(notification.id for notification in stale)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Could not remove superseded notifications for %s", key)
        return
    if removed:
        logger.debug("Removed %d superseded notification(s) for %s", removed, key)


__all__ = [
    "DEFAULT_CONTENT",
    "INTEREST_CONTENT",
    "MATCH_CONTENT",
    "MESSAGE_CONTENT",
    "InvalidNotificationArgument",
    "create_interest_notification",
    "create_match_notification",
    "create_message_notification",
    "create_notification",
    "default_content",
    "notify",
]
