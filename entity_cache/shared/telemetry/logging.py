"""Logging for entity-cache.

Every module logs under the "entity_cache" namespace. As a library it
never touches the root logger; setup_logging() only attaches a handler
to the package logger for scripts and local debugging.
"""

import logging
import sys
from typing import TextIO

from entity_cache.core.config import Settings, get_settings

PACKAGE_LOGGER = "entity_cache"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    settings: Settings | None = None, stream: TextIO | None = None
) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Level is DEBUG when settings.debug is True (cache hits, misses and
    skipped templates become visible), otherwise INFO. Calling it again
    replaces the handler instead of adding a second one.

    Args:
        settings: Optional Settings; defaults to get_settings().
        stream: Output stream; defaults to stdout.

    Returns:
        The configured package logger.
    """
    settings = settings or get_settings()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_entity_cache_handler", False):
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._entity_cache_handler = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
