"""Server clock for notification and matching timestamps.

Rows store naive datetimes in the app timezone (SQLite drops offsets); the
repositories hand aware datetimes to the domain layer. Ordering of
notifications and the inbox poll cursor both depend on this clock being the
single source of ``created_at``.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pawmatch.config import get_settings


@lru_cache(maxsize=1)
def app_timezone() -> tzinfo:
    """Zone named by ``APP_TIMEZONE``; UTC when unset or unknown."""

    name = (get_settings().app_timezone or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        return timezone.utc


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach or convert ``value`` to the app timezone."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=app_timezone())
    return value.astimezone(app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    localized = ensure_app_timezone(value)
    return None if localized is None else localized.replace(tzinfo=None)


def now_in_app_naive_datetime() -> datetime:
    """Value used for ``created_at`` columns."""

    return datetime.now(tz=app_timezone()).replace(tzinfo=None)
