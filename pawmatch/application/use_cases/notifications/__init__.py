"""Public helpers for creating, reading and maintaining notifications."""

from .dedup import (
    CleanupResult,
    cleanup_duplicate_notifications,
    find_duplicate_ids,
    list_notifications,
)
from .factory import (
    InvalidNotificationArgument,
    create_interest_notification,
    create_match_notification,
    create_message_notification,
    create_notification,
    default_content,
    notify,
)
from .inbox import CONSUMER_BELL, CONSUMER_PAGE, NotificationInbox
from .integrity import (
    DeletionResult,
    InvalidNotification,
    NotificationValidation,
    ValidationIssue,
    delete_invalid_notifications,
    find_invalid_notifications,
    summarize_notifications,
    validate_notification,
)
from .read_state import (
    count_unread_notifications,
    delete_notification,
    mark_all_notifications_as_read,
    mark_notifications_as_read,
)

__all__ = [
    "CleanupResult",
    "cleanup_duplicate_notifications",
    "find_duplicate_ids",
    "list_notifications",
    "InvalidNotificationArgument",
    "create_notification",
    "create_match_notification",
    "create_message_notification",
    "create_interest_notification",
    "default_content",
    "notify",
    "CONSUMER_BELL",
    "CONSUMER_PAGE",
    "NotificationInbox",
    "DeletionResult",
    "InvalidNotification",
    "NotificationValidation",
    "ValidationIssue",
    "delete_invalid_notifications",
    "find_invalid_notifications",
    "summarize_notifications",
    "validate_notification",
    "count_unread_notifications",
    "delete_notification",
    "mark_all_notifications_as_read",
    "mark_notifications_as_read",
]
