"""SQLAlchemy model for direct conversations."""

from sqlalchemy import Column, DateTime, Integer, String

from pawmatch.infrastructure.database import Base
from pawmatch.utils import now_in_app_naive_datetime


class DirectConversationModel(Base):
    """Conversation between exactly two users."""

    __tablename__ = "direct_conversations"

    id = Column(Integer, primary_key=True, index=True)
    user1_id = Column(String(64), nullable=False, index=True)
    user2_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["DirectConversationModel"]
