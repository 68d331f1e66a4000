"""Timezone helpers shared by the persistence layer."""

from .datetime import (
    app_timezone,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)

__all__ = [
    "app_timezone",
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "now_in_app_naive_datetime",
]
