"""Routes driving the swipe screen of the authenticated user."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.application.use_cases.matching import (
    PetNotFoundError,
    SwipeActionError,
    SwipeOutcome,
    SwipeSession,
    SwipeStateError,
    swipe_sessions,
)
from pawmatch.domain.entities import Pet
from pawmatch.infrastructure.database import get_db
from pawmatch.interfaces.api.dependencies import get_current_user_id
from pawmatch.interfaces.api.schemas import (
    ConversationRead,
    PetRead,
    SwipeFilters,
    SwipeOutcomeRead,
    SwipePetChange,
    SwipeSessionRead,
    SwipeSessionStart,
)

router = APIRouter(prefix="/swipe", tags=["swipe"])
logger = logging.getLogger(__name__)


def _pet_to_schema(pet: Pet | None) -> PetRead | None:
    if pet is None:
        return None
    return PetRead.model_validate(pet)


def _session_to_schema(swipe: SwipeSession) -> SwipeSessionRead:
    return SwipeSessionRead(
        state=swipe.state.value,
        from_pet=_pet_to_schema(swipe.from_pet),
        current=_pet_to_schema(swipe.current),
        remaining=swipe.remaining,
        species=swipe.species_filter,
        gender=swipe.gender_filter,
        pending_reason=swipe.pending_reason,
        matched_pet=_pet_to_schema(swipe.matched_pet),
    )


def _outcome_to_schema(outcome: SwipeOutcome, swipe: SwipeSession) -> SwipeOutcomeRead:
    return SwipeOutcomeRead(
        status=outcome.status.value,
        pet=PetRead.model_validate(outcome.pet),
        reason=outcome.reason,
        notification_ids=[n.id for n in outcome.notifications if n.id is not None],
        session=_session_to_schema(swipe),
    )


def _require_session(user_id: str) -> SwipeSession:
    swipe = swipe_sessions.get(user_id)
    if swipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active swipe session")
    return swipe


@contextmanager
def _swipe_errors() -> Iterator[None]:
    try:
        yield
    except PetNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SwipeStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except (SwipeActionError, SQLAlchemyError) as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/session", response_model=SwipeSessionRead, status_code=status.HTTP_201_CREATED)
def start_session(
    payload: SwipeSessionStart,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> SwipeSessionRead:
    """Start swiping on behalf of one of the user's pets."""

    swipe = swipe_sessions.open(user_id)
    with _swipe_errors():
        try:
            swipe.start(db, payload.from_pet_id, species=payload.species, gender=payload.gender)
        except PetNotFoundError:
            swipe_sessions.close(user_id)
            raise
    return _session_to_schema(swipe)


@router.get("/session", response_model=SwipeSessionRead)
def get_session(user_id: str = Depends(get_current_user_id)) -> SwipeSessionRead:
    return _session_to_schema(_require_session(user_id))


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
def close_session(user_id: str = Depends(get_current_user_id)) -> Response:
    if not swipe_sessions.close(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active swipe session")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/like", response_model=SwipeOutcomeRead)
def like_current(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> SwipeOutcomeRead:
    """Like the pet on screen; the response tells whether it was a match."""

    swipe = _require_session(user_id)
    with _swipe_errors():
        outcome = swipe.like(db)
    return _outcome_to_schema(outcome, swipe)


@router.post("/dislike", response_model=SwipeOutcomeRead)
def dislike_current(user_id: str = Depends(get_current_user_id)) -> SwipeOutcomeRead:
    swipe = _require_session(user_id)
    with _swipe_errors():
        outcome = swipe.dislike()
    return _outcome_to_schema(outcome, swipe)


@router.post("/acknowledge", response_model=SwipeSessionRead)
def acknowledge_notice(user_id: str = Depends(get_current_user_id)) -> SwipeSessionRead:
    swipe = _require_session(user_id)
    with _swipe_errors():
        swipe.acknowledge()
    return _session_to_schema(swipe)


@router.post("/refresh", response_model=SwipeSessionRead)
def refresh_queue(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> SwipeSessionRead:
    """Clear the filters and load a new batch of candidates."""

    swipe = _require_session(user_id)
    with _swipe_errors():
        swipe.refresh(db)
    return _session_to_schema(swipe)


@router.put("/filters", response_model=SwipeSessionRead)
def update_filters(
    payload: SwipeFilters,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> SwipeSessionRead:
    swipe = _require_session(user_id)
    with _swipe_errors():
        swipe.apply_filters(db, species=payload.species, gender=payload.gender)
    return _session_to_schema(swipe)


@router.put("/pet", response_model=SwipeSessionRead)
def change_pet(
    payload: SwipePetChange,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> SwipeSessionRead:
    swipe = _require_session(user_id)
    with _swipe_errors():
        swipe.change_pet(db, payload.pet_id)
    return _session_to_schema(swipe)


@router.post(
    "/conversation", response_model=ConversationRead, status_code=status.HTTP_201_CREATED
)
def start_conversation(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> ConversationRead:
    """Open the direct conversation with the owner of the last match."""

    swipe = _require_session(user_id)
    with _swipe_errors():
        conversation = swipe.start_conversation(db)
    logger.info("User %s opened conversation %s from a match", user_id, conversation.id)
    return ConversationRead.model_validate(conversation)
