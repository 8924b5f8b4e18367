"""Logging setup for recipebox.

Library modules log through ``logging.getLogger(__name__)``; user-facing CLI
output goes through ``click.echo``.
"""

import logging

from .config import get_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def setup_logging(level: str | int | None = None) -> None:
    """
    Configure the root handler once and set the root level.

    Args:
        level: Level name or number; defaults to RECIPEBOX_LOG_LEVEL
    """
    global _configured

    resolved = level if level is not None else get_log_level()
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.WARNING

    if not _configured:
        logging.basicConfig(format=LOG_FORMAT)
        _configured = True

    logging.getLogger().setLevel(resolved)
