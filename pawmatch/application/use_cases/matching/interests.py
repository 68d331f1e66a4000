"""Recording interests and detecting mutual matches."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pawmatch.application.use_cases.notifications import (
    create_interest_notification,
    create_match_notification,
)
from pawmatch.domain.entities import Interest, Notification, Pet
from pawmatch.infrastructure.repositories import InterestRepository, PetRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeResult:
    interest: Interest
    matched: bool


def record_interest(
    session: Session, *, user_id: str, pet_id: int, from_pet_id: int
) -> Interest:
    """Persist that ``user_id`` likes ``pet_id`` through ``from_pet_id``."""

    try:
        return InterestRepository(session).create(
            Interest(id=None, user_id=user_id, pet_id=pet_id, from_pet_id=from_pet_id)
        )
    except SQLAlchemyError:
        session.rollback()
        raise


def has_mutual_interest(session: Session, *, other_owner_id: str, from_pet_id: int) -> bool:
    """Return ``True`` when ``other_owner_id`` already likes ``from_pet_id``.

    This is a plain read after the caller's own insert. Two simultaneous likes
    can both read ``False``; the match is then observed on a later check.
    """

    return InterestRepository(session).exists(user_id=other_owner_id, pet_id=from_pet_id)


def register_like(session: Session, *, user_id: str, pet: Pet, from_pet: Pet) -> LikeResult:
    """Record the like and check for the reverse interest."""

    interest = record_interest(
        session, user_id=user_id, pet_id=pet.id, from_pet_id=from_pet.id
    )
    matched = has_mutual_interest(
        session, other_owner_id=pet.owner_id, from_pet_id=from_pet.id
    )
    if matched:
        logger.info("Mutual match between pets %s and %s", from_pet.id, pet.id)
    return LikeResult(interest=interest, matched=matched)


def notify_match(
    session: Session, *, user_id: str, pet: Pet, from_pet: Pet
) -> tuple[Notification, ...]:
    """Notify both owners; each notification references the other side's pet."""

    created = (
        create_match_notification(session, user_id, pet.owner_id, pet.id),
        create_match_notification(session, pet.owner_id, user_id, from_pet.id),
    )
    if any(notification is None for notification in created):
        logger.warning("Match between pets %s and %s was not fully notified", from_pet.id, pet.id)
    return tuple(notification for notification in created if notification is not None)


def show_interest(session: Session, *, user_id: str, pet_id: int) -> Notification | None:
    """Let the owner of ``pet_id`` know that ``user_id`` is interested."""

    pet = PetRepository(session).get(pet_id)
    if pet is None:
        raise ValueError("Pet not found")
    if pet.owner_id == user_id:
        raise ValueError("You cannot show interest in your own pet")
    return create_interest_notification(session, pet.owner_id, user_id, pet.id)


__all__ = [
    "LikeResult",
    "has_mutual_interest",
    "notify_match",
    "record_interest",
    "register_like",
    "show_interest",
]
