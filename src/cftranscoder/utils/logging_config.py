"""Logging setup shared by the server entry points."""

from __future__ import annotations

import logging

from cftranscoder.config import CFT_LOG_LEVEL

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Install a single stream handler on the root logger.

    Calling this again only adjusts the level.
    """
    root = logging.getLogger()
    root.setLevel(level or CFT_LOG_LEVEL)
    if not any(getattr(handler, "_cftranscoder", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._cftranscoder = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
