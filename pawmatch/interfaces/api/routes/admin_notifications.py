"""Admin routes to inspect and repair notifications with broken references."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.application.use_cases.notifications import (
    InvalidNotification,
    cleanup_duplicate_notifications,
    delete_invalid_notifications,
    find_invalid_notifications,
    summarize_notifications,
)
from pawmatch.config import get_settings
from pawmatch.infrastructure.database import get_db
from pawmatch.interfaces.api.dependencies import AuthenticatedUser, require_admin
from pawmatch.interfaces.api.schemas import (
    CleanupResultRead,
    DeletionResultRead,
    InvalidNotificationDeleteRequest,
    InvalidNotificationRead,
    InvalidNotificationScan,
    NotificationRead,
    ValidationIssueRead,
)

router = APIRouter(prefix="/admin/notifications", tags=["admin"])
logger = logging.getLogger(__name__)


def _to_read_model(item: InvalidNotification) -> InvalidNotificationRead:
    notification = item.notification
    return InvalidNotificationRead(
        notification=NotificationRead(
            id=notification.id or 0,
            user_id=notification.user_id or "",
            type=notification.type,
            sender_id=notification.sender_id,
            content=notification.content,
            reference_id=notification.reference_id,
            data=notification.data or {},
            is_read=notification.is_read,
            created_at=notification.created_at,
        ),
        issues=[ValidationIssueRead.model_validate(issue) for issue in item.validation.issues],
    )


@router.get("/invalid", response_model=InvalidNotificationScan)
def list_invalid_notifications(
    limit: int | None = Query(default=None, ge=1, le=5000),
    db: Session = Depends(get_db),
    admin: AuthenticatedUser = Depends(require_admin),
) -> InvalidNotificationScan:
    """Scan the newest notifications and report those with broken references."""

    scan_limit = limit or get_settings().admin_scan_limit
    try:
        counts = summarize_notifications(db, limit=scan_limit)
        invalid = find_invalid_notifications(db, limit=scan_limit)
    except SQLAlchemyError as exc:
        logger.exception("Invalid notification scan failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not scan notifications",
        ) from exc

    logger.info(
        "Admin %s scanned %d notification(s), %d invalid", admin.id, counts.total, counts.invalid
    )
    return InvalidNotificationScan(
        total=counts.total,
        invalid=counts.invalid,
        types=dict(counts.types),
        items=[_to_read_model(item) for item in invalid],
    )


@router.post("/invalid/delete", response_model=DeletionResultRead)
def delete_invalid(
    payload: InvalidNotificationDeleteRequest,
    db: Session = Depends(get_db),
    admin: AuthenticatedUser = Depends(require_admin),
) -> DeletionResultRead:
    """Delete the notifications the administrator selected."""

    result = delete_invalid_notifications(db, payload.ids)
    if result.success:
        logger.info("Admin %s deleted %d notification(s)", admin.id, result.count)
    return DeletionResultRead.model_validate(result)


@router.post("/cleanup/{user_id}", response_model=CleanupResultRead)
def cleanup_user_duplicates(
    user_id: str,
    db: Session = Depends(get_db),
    admin: AuthenticatedUser = Depends(require_admin),
) -> CleanupResultRead:
    return CleanupResultRead.model_validate(cleanup_duplicate_notifications(db, user_id))
