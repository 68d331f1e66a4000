"""Domain entity recording interest expressed in another pet."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Interest:
    """``user_id`` likes ``pet_id`` on behalf of their own pet ``from_pet_id``."""

    id: int | None
    user_id: str
    pet_id: int
    from_pet_id: int
    created_at: datetime | None = None
