"""
Logging Configuration

The library modules only create ``logging.getLogger(__name__)`` loggers and
the package root carries a ``NullHandler``, so nothing is printed unless an
application opts in. The ``control-analyzer`` runner opts in here, routing
engine, simulator and tuner messages to stderr so that the analysis report
on stdout stays clean for redirection.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "control_analyzer"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: Union[int, str]) -> int:
    """
    Convert a level name such as ``"debug"`` (as given to ``--log-level``)
    to its numeric value; integers pass through unchanged.
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Attach console (and optionally file) handlers to the package logger.

    Calling it again replaces the previous handlers, so the runner can be
    invoked repeatedly in one process (as the tests do) without duplicated
    output.

    Parameters
    ----------
    level : int or str
        Threshold for the ``control_analyzer`` logger and its handlers,
        either a ``logging`` constant or a level name
    log_file : str, optional
        Also write the analysis log to this path (overwritten on each run)
    """
    level = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Analysis logging at %s", logging.getLevelName(level))
