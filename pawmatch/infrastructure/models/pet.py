"""SQLAlchemy model for the pets table."""

from sqlalchemy import Column, DateTime, Integer, String

from pawmatch.infrastructure.database import Base
from pawmatch.utils import now_in_app_naive_datetime


class PetModel(Base):
    """Database representation of a listed pet."""

    __tablename__ = "pets"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(64), nullable=False, index=True)
    name = Column(String(80), nullable=False)
    species = Column(String(40), nullable=True, index=True)
    gender = Column(String(20), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["PetModel"]
