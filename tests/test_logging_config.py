"""Tests for the logging setup."""
import logging

import pytest

from magneticmirror.logging_config import APP_LOGGER, THIRD_PARTY_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_loggers():
    names = (APP_LOGGER, *THIRD_PARTY_LOGGERS)
    saved = {name: (logging.getLogger(name).level, list(logging.getLogger(name).handlers)) for name in names}
    yield
    for name, (level, handlers) in saved.items():
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(level)
        for handler in handlers:
            logger.addHandler(handler)


class TestSetupLogging:
    def test_debug_keeps_libraries_quiet(self):
        setup_logging(level=logging.DEBUG)
        assert logging.getLogger(APP_LOGGER).level == logging.DEBUG
        for name in THIRD_PARTY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
        assert not logging.getLogger("numba.core.ssa").isEnabledFor(logging.DEBUG)

    def test_library_level_is_configurable(self):
        setup_logging(level=logging.INFO, third_party_level=logging.DEBUG)
        assert logging.getLogger("numba").level == logging.DEBUG

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        path = tmp_path / "viewer.log"
        logger = setup_logging(level=logging.INFO, log_file=str(path))
        assert len(logger.handlers) == 2

        logging.getLogger("magneticmirror.controller.playback").info("marker moved")
        for handler in logger.handlers:
            handler.flush()
        assert "marker moved" in path.read_text(encoding="utf-8")
