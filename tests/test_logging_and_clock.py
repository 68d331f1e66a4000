"""Tests for the logging setup and the server clock helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from pawmatch.config import Settings
from pawmatch.logging import resolve_log_level, setup_logging
from pawmatch.utils import (
    app_timezone,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_naive_datetime,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("loud", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_resolve_log_level(name, expected):
    assert resolve_log_level(name) == expected


def test_setup_logging_uses_the_configured_level():
    root = logging.getLogger()
    previous = root.level
    try:
        setup_logging(Settings(secret_key="test-secret-key", log_level="error"))
        assert root.level == logging.ERROR
    finally:
        root.setLevel(previous)


def test_naive_values_are_read_in_the_app_timezone():
    assert app_timezone() == timezone.utc
    aware = ensure_app_timezone(datetime(2024, 5, 1, 12, 0))

    assert aware.tzinfo is not None
    assert aware.utcoffset() == timedelta(0)


def test_aware_values_are_stored_as_naive_app_time():
    value = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

    assert ensure_app_naive_datetime(value) == datetime(2024, 5, 1, 12, 0)
    assert ensure_app_naive_datetime(None) is None
    assert now_in_app_naive_datetime().tzinfo is None
