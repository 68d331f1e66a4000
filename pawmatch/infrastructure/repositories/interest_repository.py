"""Persistence helpers for interests between pets."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from pawmatch.domain.entities import Interest
from pawmatch.infrastructure.models import InterestModel
from pawmatch.utils import ensure_app_timezone


class InterestRepository:
    """Insert and query :class:`Interest` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, interest: Interest) -> Interest:
        model = InterestModel(
            user_id=interest.user_id,
            pet_id=interest.pet_id,
            from_pet_id=interest.from_pet_id,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def exists(self, *, user_id: str, pet_id: int) -> bool:
        return (
            self.session.query(InterestModel.id)
            .filter(InterestModel.user_id == user_id, InterestModel.pet_id == pet_id)
            .first()
            is not None
        )

    def list_liked_pet_ids(self, user_id: str) -> Sequence[int]:
        rows = (
            self.session.query(InterestModel.pet_id)
            .filter(InterestModel.user_id == user_id)
            .all()
        )
        return [row.pet_id for row in rows]

    @staticmethod
    def _to_entity(model: InterestModel) -> Interest:
        return Interest(
            id=model.id,
            user_id=model.user_id,
            pet_id=model.pet_id,
            from_pet_id=model.from_pet_id,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["InterestRepository"]
