"""Read access to pets for matching and reference validation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy.orm import Session

from pawmatch.domain.entities import Pet
from pawmatch.infrastructure.models import PetModel
from pawmatch.utils import ensure_app_naive_datetime, ensure_app_timezone


class PetRepository:
    """Query helpers over the ``pets`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, pet_id: int) -> Pet | None:
        model = self.session.get(PetModel, pet_id)
        return self._to_entity(model) if model else None

    def exists(self, pet_id: int) -> bool:
        return (
            self.session.query(PetModel.id).filter(PetModel.id == pet_id).first()
            is not None
        )

    def list_by_owner(self, owner_id: str) -> Sequence[Pet]:
        query = (
            self.session.query(PetModel)
            .filter(PetModel.owner_id == owner_id)
            .order_by(PetModel.created_at.desc(), PetModel.id.desc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_candidates(
        self,
        *,
        exclude_owner_id: str,
        exclude_pet_ids: Iterable[int] = (),
        species: str | None = None,
        gender: str | None = None,
        limit: int = 20,
    ) -> Sequence[Pet]:
        """Return pets not owned by ``exclude_owner_id``, newest first."""

        query = self.session.query(PetModel).filter(
            PetModel.owner_id != exclude_owner_id
        )
        excluded = {pet_id for pet_id in exclude_pet_ids if pet_id is not None}
        if excluded:
            query = query.filter(PetModel.id.notin_(excluded))
        if species:
            query = query.filter(PetModel.species == species)
        if gender:
            query = query.filter(PetModel.gender == gender)
        query = query.order_by(PetModel.created_at.desc(), PetModel.id.desc()).limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, pet: Pet) -> Pet:
        model = PetModel(
            owner_id=pet.owner_id,
            name=pet.name,
            species=pet.species,
            gender=pet.gender,
        )
        if pet.created_at is not None:
            model.created_at = ensure_app_naive_datetime(pet.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: PetModel) -> Pet:
        return Pet(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            species=model.species,
            gender=model.gender,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["PetRepository"]
