"""setup_logging: package-scoped handler and level."""

import io
import logging

from entity_cache.core.config import Settings
from entity_cache.shared.telemetry.logging import PACKAGE_LOGGER, get_logger, setup_logging


def test_setup_logging_debug_level_and_single_handler() -> None:
    stream = io.StringIO()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(package_logger.handlers)
    try:
        setup_logging(Settings(_env_file=None, debug=True), stream=stream)
        setup_logging(Settings(_env_file=None, debug=True), stream=stream)
        added = [h for h in package_logger.handlers if h not in before]
        assert len(added) == 1
        assert package_logger.level == logging.DEBUG

        get_logger("entity_cache.tests").debug("Cache MISS: users.42")
        assert "Cache MISS: users.42" in stream.getvalue()
        assert not any(h in logging.getLogger().handlers for h in added)
    finally:
        for handler in list(package_logger.handlers):
            if handler not in before:
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)


def test_setup_logging_info_level_without_debug() -> None:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    before = list(package_logger.handlers)
    try:
        setup_logging(Settings(_env_file=None, debug=False), stream=io.StringIO())
        assert package_logger.level == logging.INFO
    finally:
        for handler in list(package_logger.handlers):
            if handler not in before:
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)
