"""Root logging configuration for the API process and maintenance scripts."""

from __future__ import annotations

import logging

from pawmatch.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def resolve_log_level(name: str | None) -> int:
    """Map a level name such as ``"debug"`` to its number; INFO if unknown."""

    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    level = resolve_log_level(settings.log_level)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level)


__all__ = ["LOG_FORMAT", "resolve_log_level", "setup_logging"]
