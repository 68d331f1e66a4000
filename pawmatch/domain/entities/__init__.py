"""Domain entities exposed by the application."""

from .conversation import DirectConversation
from .interest import Interest
from .notification import (
    InterestSubject,
    MatchSubject,
    MessageSubject,
    Notification,
    NotificationCounts,
    NotificationKey,
    NotificationSubject,
    NotificationType,
)
from .pet import PET_GENDER_FEMALE, PET_GENDER_MALE, PET_GENDERS, Pet

__all__ = [
    "DirectConversation",
    "Interest",
    "InterestSubject",
    "MatchSubject",
    "MessageSubject",
    "Notification",
    "NotificationCounts",
    "NotificationKey",
    "NotificationSubject",
    "NotificationType",
    "PET_GENDER_FEMALE",
    "PET_GENDER_MALE",
    "PET_GENDERS",
    "Pet",
]
