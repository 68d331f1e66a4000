from .admin import (
    DeletionResultRead,
    InvalidNotificationDeleteRequest,
    InvalidNotificationRead,
    InvalidNotificationScan,
    ValidationIssueRead,
)
from .notification import (
    CleanupResultRead,
    MessageNotificationRequest,
    NotificationMarkReadRequest,
    NotificationRead,
    NotificationResult,
    ReadAllResponse,
    UnreadCountRead,
)
from .swipe import (
    ConversationRead,
    PetRead,
    SwipeFilters,
    SwipeOutcomeRead,
    SwipePetChange,
    SwipeSessionRead,
    SwipeSessionStart,
)

__all__ = [
    "DeletionResultRead",
    "InvalidNotificationDeleteRequest",
    "InvalidNotificationRead",
    "InvalidNotificationScan",
    "ValidationIssueRead",
    "CleanupResultRead",
    "MessageNotificationRequest",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "NotificationResult",
    "ReadAllResponse",
    "UnreadCountRead",
    "ConversationRead",
    "PetRead",
    "SwipeFilters",
    "SwipeOutcomeRead",
    "SwipePetChange",
    "SwipeSessionRead",
    "SwipeSessionStart",
]
