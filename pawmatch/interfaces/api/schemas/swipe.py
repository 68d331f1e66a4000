"""Schemas used by the swipe endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: str
    name: str
    species: str | None = None
    gender: str | None = None
    created_at: datetime | None = None


class SwipeFilters(BaseModel):
    """Optional candidate filters; empty values mean "any"."""

    species: str | None = Field(default=None, max_length=50)
    gender: str | None = Field(default=None, max_length=20)


class SwipeSessionStart(SwipeFilters):
    from_pet_id: int = Field(..., ge=1)


class SwipePetChange(BaseModel):
    pet_id: int = Field(..., ge=1)


class SwipeSessionRead(BaseModel):
    """Snapshot of the swipe screen state."""

    state: str
    from_pet: PetRead | None = None
    current: PetRead | None = None
    remaining: int = 0
    species: str | None = None
    gender: str | None = None
    pending_reason: str | None = None
    matched_pet: PetRead | None = None


class SwipeOutcomeRead(BaseModel):
    status: str
    pet: PetRead
    reason: str | None = None
    notification_ids: list[int] = Field(default_factory=list)
    session: SwipeSessionRead


class ConversationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user1_id: str
    user2_id: str
    created_at: datetime | None = None


__all__ = [
    "ConversationRead",
    "PetRead",
    "SwipeFilters",
    "SwipeOutcomeRead",
    "SwipePetChange",
    "SwipeSessionRead",
    "SwipeSessionStart",
]
