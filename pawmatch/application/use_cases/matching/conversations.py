"""Direct conversations opened from matches and their message notices."""

from __future__ import annotations

from sqlalchemy.orm import Session

from pawmatch.application.use_cases.notifications import create_message_notification
from pawmatch.domain.entities import DirectConversation, Notification
from pawmatch.infrastructure.repositories import ConversationRepository


def open_conversation(session: Session, *, user_id: str, other_user_id: str) -> DirectConversation:
    """Return the conversation between both users, creating it when missing."""

    if user_id == other_user_id:
        raise ValueError("A conversation needs two different users")
    repository = ConversationRepository(session)
    existing = repository.get_between(user_id, other_user_id)
    if existing is not None:
        return existing
    return repository.create(user1_id=user_id, user2_id=other_user_id)


def notify_message_sent(
    session: Session,
    *,
    conversation_id: int,
    sender_id: str,
    message_text: str | None = None,
) -> Notification | None:
    """Notify the other participant of ``conversation_id`` about a new message."""

    conversation = ConversationRepository(session).get(conversation_id)
    if conversation is None:
        raise ValueError("Conversation not found")
    if not conversation.includes(sender_id):
        raise PermissionError("Sender is not part of this conversation")
    recipient_id = (
        conversation.user2_id if conversation.user1_id == sender_id else conversation.user1_id
    )
    return create_message_notification(
        session, recipient_id, sender_id, conversation_id, message_text
    )


__all__ = ["notify_message_sent", "open_conversation"]
