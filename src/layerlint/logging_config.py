"""
Logging configuration for layerlint.

Terminal logs go to stderr through rich so reports on stdout stay
machine-readable. A log file, when requested, keeps the stage trace of a
run even when the terminal is quiet.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import Verbosity

ROOT_LOGGER = "layerlint"

_CONSOLE_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

# A log file records stage progress at least
_FILE_LEVEL = logging.INFO


def setup_logging(
    verbosity: Verbosity = "normal", log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Configure the layerlint loggers for one CLI run.

    Args:
        verbosity: quiet (errors only), normal (warnings) or verbose (debug,
            with timestamps, source paths and traceback locals)
        log_file: Optional file that receives INFO and above (DEBUG when
            verbose) regardless of the terminal level

    Returns:
        The root layerlint logger
    """
    console_level = _CONSOLE_LEVELS[verbosity]
    verbose = verbosity == "verbose"

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    console_handler.setLevel(console_level)
    handlers: list[logging.Handler] = [console_handler]

    level = console_level
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        file_handler.setLevel(min(console_level, _FILE_LEVEL))
        handlers.append(file_handler)
        level = min(console_level, _FILE_LEVEL)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``layerlint`` namespace (``__name__`` works as is)."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
