"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys

from exchange.core.config import Settings

# Third-party loggers that are too chatty at INFO.
_QUIET_LOGGERS = (
    "aiosqlite",
    "httpx",
    "httpcore",
    "asyncio",
)


def configure_logging(settings: Settings) -> None:
    """Install a single stderr handler on the root logger.

    Safe to call more than once; previous handlers installed here are replaced.
    """
    level = logging.DEBUG if settings.debug else getattr(logging, settings.logging.level.upper(), logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_exchange_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(settings.logging.format))
    handler._exchange_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if not settings.database.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
