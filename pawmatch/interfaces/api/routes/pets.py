"""Routes for interactions on a single pet."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.application.use_cases.matching import show_interest
from pawmatch.infrastructure.database import get_db
from pawmatch.interfaces.api.dependencies import get_current_user_id
from pawmatch.interfaces.api.schemas import NotificationRead, NotificationResult

router = APIRouter(prefix="/pets", tags=["pets"])


@router.post("/{pet_id}/interest", response_model=NotificationResult)
def show_interest_in_pet(
    pet_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationResult:
    """Let the owner of ``pet_id`` know the user is interested."""

    try:
        notification = show_interest(db, user_id=user_id, pet_id=pet_id)
    except ValueError as exc:
        status_code = status.HTTP_400_BAD_REQUEST
        if "not found" in str(exc).lower():
            status_code = status.HTTP_404_NOT_FOUND
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Could not load the pet"
        ) from exc

    if notification is None:
        return NotificationResult(notified=False)
    return NotificationResult(
        notified=True,
        notification=NotificationRead.model_validate(notification),
    )
