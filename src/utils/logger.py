# -*- coding: utf-8 -*-
"""Logging utilities using loguru."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name} | {message}"


def setup_logger(
    name: str,
    log_level: str = "INFO",
    log_file: str | None = None,
    log_dir: str | None = None,
    sink=None,
):
    """Set up loguru logger configuration.

    Args:
        name: Logger name (typically __name__).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file name. If None, logs only to console.
        log_dir: Directory for log files. Defaults to 'data/logs'.
        sink: Console sink, defaults to stdout.

    Returns:
        Loguru logger bound to ``name``.
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sink or sys.stdout,
        format=CONSOLE_FORMAT,
        level=log_level.upper(),
        colorize=sink is None,
    )

    if log_file:
        if log_dir is None:
            log_dir = Path(__file__).parent.parent.parent / "data" / "logs"
        else:
            log_dir = Path(log_dir)

        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / log_file

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            encoding="utf-8",
        )

    return get_logger(name)


def get_logger(name: str):
    """Get loguru logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Loguru logger instance (bound to the name).
    """
    return logger.bind(name=name)
