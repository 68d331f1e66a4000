"""ORM models used by the application infrastructure."""

from .conversation import DirectConversationModel
from .interest import InterestModel
from .notification import NotificationModel
from .pet import PetModel

__all__ = [
    "DirectConversationModel",
    "InterestModel",
    "NotificationModel",
    "PetModel",
]
