"""Endpoints and websocket handler for a user's notifications."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pawmatch.application.use_cases.notifications import (
    CONSUMER_BELL,
    CONSUMER_PAGE,
    NotificationInbox,
    cleanup_duplicate_notifications,
    count_unread_notifications,
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_as_read,
    mark_notifications_as_read,
)
from pawmatch.domain.entities import Notification
from pawmatch.infrastructure.database import get_db, get_session_factory
from pawmatch.infrastructure.notifications import serialize_notification
from pawmatch.interfaces.api.dependencies import get_current_user_id, resolve_current_user
from pawmatch.interfaces.api.schemas import (
    CleanupResultRead,
    NotificationMarkReadRequest,
    NotificationRead,
    ReadAllResponse,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

_CONSUMERS = (CONSUMER_BELL, CONSUMER_PAGE)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.user_id,
        type=notification.type,
        sender_id=notification.sender_id,
        content=notification.content,
        reference_id=notification.reference_id,
        data=notification.data or {},
        is_read=notification.is_read,
        created_at=notification.created_at,
    )


def _unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Notifications are temporarily unavailable",
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> list[NotificationRead]:
    """Return the newest notifications after collapsing duplicates."""

    try:
        notifications = list_notifications_uc(db, user_id, limit=limit)
    except SQLAlchemyError as exc:
        logger.exception("Failed to list notifications for user %s", user_id)
        raise _unavailable() from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> UnreadCountRead:
    try:
        count = count_unread_notifications(db, user_id=user_id)
    except SQLAlchemyError as exc:
        raise _unavailable() from exc
    return UnreadCountRead(count=count)


@router.post("/read", response_model=list[NotificationRead])
def mark_as_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> list[NotificationRead]:
    """Mark the given notifications as read and return the rows that changed."""

    try:
        changed = mark_notifications_as_read(
            db, user_id=user_id, notification_ids=payload.unique_ids()
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise _unavailable() from exc
    return [_notification_to_schema(notification) for notification in changed]


@router.post("/read-all", response_model=ReadAllResponse)
def mark_all_as_read(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> ReadAllResponse:
    try:
        changed = mark_all_notifications_as_read(db, user_id=user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise _unavailable() from exc
    return ReadAllResponse(updated=len(changed))


@router.post("/cleanup", response_model=CleanupResultRead)
def cleanup_duplicates(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> CleanupResultRead:
    """Collapse duplicate notifications of the authenticated user."""

    return CleanupResultRead.model_validate(cleanup_duplicate_notifications(db, user_id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def dismiss_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> Response:
    try:
        delete_notification_uc(db, user_id=user_id, notification_id=notification_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise _unavailable() from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    token: str | None = None,
    consumer: str = CONSUMER_BELL,
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
) -> None:
    """Stream the live notification list of the authenticated user."""

    if consumer not in _CONSUMERS:
        await websocket.close(code=1008)
        return
    try:
        user = resolve_current_user(token)
    except HTTPException:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    send_lock = asyncio.Lock()
    initialized = False

    async def send(message: dict[str, Any]) -> None:
        async with send_lock:
            await websocket.send_json(message)

    async def on_change(notifications: Sequence[Notification]) -> None:
        if not initialized:
            return
        await send(
            {
                "type": "notifications",
                "data": [serialize_notification(n) for n in notifications],
                "unread": inbox.unread_count,
            }
        )

    async def on_toast(notification: Notification) -> None:
        # The init frame already carries anything that arrived while starting.
        if not initialized:
            return
        await send({"type": "toast", "data": serialize_notification(notification)})

    inbox = NotificationInbox(
        session_factory,
        user.id,
        consumer=consumer,
        on_change=on_change,
        on_toast=on_toast,
    )
    try:
        await inbox.start()
        await send(
            {
                "type": "init",
                "data": [serialize_notification(n) for n in inbox.notifications],
                "unread": inbox.unread_count,
            }
        )
        initialized = True
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await send({"type": "pong"})
            elif message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    await inbox.mark_as_read(i for i in ids if isinstance(i, int))
            elif message_type == "read_all":
                await inbox.mark_all_as_read()
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", user.id)
    finally:
        inbox.close()
