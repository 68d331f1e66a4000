"""SQLAlchemy model for recorded interests."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from pawmatch.infrastructure.database import Base
from pawmatch.utils import now_in_app_naive_datetime


class InterestModel(Base):
    """A user liking ``pet_id`` through their own pet ``from_pet_id``."""

    __tablename__ = "interests"
    __table_args__ = (
        UniqueConstraint("user_id", "pet_id", "from_pet_id", name="uq_interest_pair"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    pet_id = Column(Integer, ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True)
    from_pet_id = Column(Integer, ForeignKey("pets.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["InterestModel"]
