"""
Logging Configuration
=====================
Sets up the 'magneticmirror' logger for the viewer.

Why is this file needed?
------------------------
1. One Place: main() calls setup_logging() once; every module only does
   logging.getLogger(__name__).
2. Noise Control: numba reports every compilation pass at DEBUG, which buries
   the playback messages under --debug. Library loggers are held at their own
   level, independent of the application level.
"""
import logging
import sys
from typing import Optional

APP_LOGGER: str = "magneticmirror"

# Libraries that log heavily while the kernels compile or the plotter starts
THIRD_PARTY_LOGGERS: tuple[str, ...] = ("numba", "pyvista")

LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    third_party_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Configures the application logger.

    Args:
        level: Level of the 'magneticmirror' logger and its handlers.
        log_file: Optional path; the log is also written there (overwritten).
        third_party_level: Level for the loggers in THIRD_PARTY_LOGGERS.

    Returns:
        The configured application logger.
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)

    # Calling setup_logging() again replaces the handlers instead of duplicating them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)} (libraries at {logging.getLevelName(third_party_level)}).")
    return logger
