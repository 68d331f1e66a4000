"""Candidate queue loading for swipe sessions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from pawmatch.domain.entities import Pet
from pawmatch.infrastructure.repositories import InterestRepository, PetRepository


def load_candidate_queue(
    session: Session,
    *,
    user_id: str,
    species: str | None = None,
    gender: str | None = None,
    skipped_pet_ids: Iterable[int] = (),
    limit: int = 20,
) -> Sequence[Pet]:
    """Return pets ``user_id`` has not interacted with yet, newest first.

    Pets owned by the user and pets the user already liked are always
    excluded, so a refresh never brings back an earlier interaction.
    """

    liked = InterestRepository(session).list_liked_pet_ids(user_id)
    return PetRepository(session).list_candidates(
        exclude_owner_id=user_id,
        exclude_pet_ids=[*liked, *skipped_pet_ids],
        species=species or None,
        gender=gender or None,
        limit=limit,
    )


__all__ = ["load_candidate_queue"]
