"""Repository implementations for infrastructure layer."""

from .conversation_repository import ConversationRepository
from .interest_repository import InterestRepository
from .notification_repository import NotificationRepository
from .pet_repository import PetRepository

__all__ = [
    "ConversationRepository",
    "InterestRepository",
    "NotificationRepository",
    "PetRepository",
]
