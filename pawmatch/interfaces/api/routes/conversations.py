"""Routes called by the chat collaborator after a message is stored."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.application.use_cases.matching import notify_message_sent
from pawmatch.infrastructure.database import get_db
from pawmatch.interfaces.api.dependencies import get_current_user_id
from pawmatch.interfaces.api.schemas import (
    MessageNotificationRequest,
    NotificationRead,
    NotificationResult,
)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("/{conversation_id}/message-notifications", response_model=NotificationResult)
def notify_new_message(
    conversation_id: int,
    payload: MessageNotificationRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationResult:
    """Notify the other participant that ``user_id`` sent a message."""

    try:
        notification = notify_message_sent(
            db,
            conversation_id=conversation_id,
            sender_id=user_id,
            message_text=payload.message_text,
        )
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not load the conversation",
        ) from exc

    if notification is None:
        return NotificationResult(notified=False)
    return NotificationResult(
        notified=True,
        notification=NotificationRead.model_validate(notification),
    )
