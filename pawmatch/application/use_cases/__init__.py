"""Aggregate application use cases."""

from .notifications import (
    cleanup_duplicate_notifications,
    create_interest_notification,
    create_match_notification,
    create_message_notification,
    delete_invalid_notifications,
    find_invalid_notifications,
)
from .matching import check_compatibility

__all__ = [
    "check_compatibility",
    "cleanup_duplicate_notifications",
    "create_interest_notification",
    "create_match_notification",
    "create_message_notification",
    "delete_invalid_notifications",
    "find_invalid_notifications",
]
