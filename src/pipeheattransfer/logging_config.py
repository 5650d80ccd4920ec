"""
Logging Configuration
Sets up the package logger for the pipe heat transfer model.

The console gets a compact line per record, since a simulated design day
emits one line per pipe and hour; the optional log file keeps the full
timestamped format for post-mortems of long runs.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "pipeheattransfer"

CONSOLE_FORMAT = "%(levelname)-7s %(name)-40s %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Configures the logger of the 'pipeheattransfer' namespace.

    Args:
        level: Console logging level (e.g. logging.DEBUG, logging.INFO).
        log_file: Optional path to save logs to a file.
        file_level: Logging level of the file handler.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(min(level, file_level) if log_file else level)

    # A host may call this once per simulation environment
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    # numba's compiler is very chatty at DEBUG
    logging.getLogger("numba").setLevel(logging.WARNING)

    logger.debug(f"Logging initialized (console={logging.getLevelName(level)}, file={log_file or '-'})")
    return logger
