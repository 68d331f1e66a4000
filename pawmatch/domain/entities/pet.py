"""Domain entity representing a listed pet."""

from dataclasses import dataclass
from datetime import datetime

PET_GENDER_MALE = "male"
PET_GENDER_FEMALE = "female"
PET_GENDERS = (PET_GENDER_MALE, PET_GENDER_FEMALE)


@dataclass
class Pet:
    """Attributes of a pet that take part in matching."""

    id: int | None
    owner_id: str
    name: str
    species: str | None
    gender: str | None
    created_at: datetime | None = None
