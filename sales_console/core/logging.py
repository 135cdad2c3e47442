"""Logging setup for the sales console CLI and dashboard."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LEVEL = "INFO"

# requests logs every pooled connection through urllib3; at INFO the 30 s poll
# would bury the console's own messages.
CHATTY_LOGGERS = ("urllib3",)


def configure_logging(level: str | None = None) -> str:
    """Configure root logging and return the level name that was applied.

    ``level`` wins over the ``LOG_LEVEL`` environment variable. Unknown names
    fall back to ``INFO`` instead of failing the CLI at startup.
    """

    requested = (level or os.getenv("LOG_LEVEL") or DEFAULT_LEVEL).upper()
    resolved = requested if isinstance(logging.getLevelName(requested), int) else DEFAULT_LEVEL
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    if resolved != requested:
        logging.getLogger(__name__).warning("Unknown log level %r, using %s", requested, resolved)

    quiet = logging.DEBUG if resolved == "DEBUG" else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
    return resolved
