"""Logging helpers: namespaced loggers and one-shot CLI configuration."""

from __future__ import annotations

import logging

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a standard library logger under the ``lawe.`` namespace."""
    if not (name == "lawe" or name.startswith("lawe.")):
        name = f"lawe.{name}"
    return logging.getLogger(name)


def configure_logging(level: str | int = "WARNING") -> None:
    """Send ``lawe.*`` records to stderr at *level*.

    Unknown level names raise ``ValueError``.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved
    logging.basicConfig(format=_FORMAT)
    logging.getLogger("lawe").setLevel(level)
