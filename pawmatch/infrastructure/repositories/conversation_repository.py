"""Persistence helpers for direct conversations."""

from __future__ import annotations

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from pawmatch.domain.entities import DirectConversation
from pawmatch.infrastructure.models import DirectConversationModel
from pawmatch.utils import ensure_app_timezone


class ConversationRepository:
    """Look up and open conversations between two users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, conversation_id: int) -> DirectConversation | None:
        model = self.session.get(DirectConversationModel, conversation_id)
        return self._to_entity(model) if model else None

    def exists(self, conversation_id: int) -> bool:
        return (
            self.session.query(DirectConversationModel.id)
            .filter(DirectConversationModel.id == conversation_id)
            .first()
            is not None
        )

    def get_between(self, user_a: str, user_b: str) -> DirectConversation | None:
        model = (
            self.session.query(DirectConversationModel)
            .filter(
                or_(
                    and_(
                        DirectConversationModel.user1_id == user_a,
                        DirectConversationModel.user2_id == user_b,
                    ),
                    and_(
                        DirectConversationModel.user1_id == user_b,
                        DirectConversationModel.user2_id == user_a,
                    ),
                )
            )
            .order_by(DirectConversationModel.id.asc())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, *, user1_id: str, user2_id: str) -> DirectConversation:
        model = DirectConversationModel(user1_id=user1_id, user2_id=user2_id)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: DirectConversationModel) -> DirectConversation:
        return DirectConversation(
            id=model.id,
            user1_id=model.user1_id,
            user2_id=model.user2_id,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["ConversationRepository"]
