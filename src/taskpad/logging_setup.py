#!/usr/bin/env python3
"""
Logging configuration.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "taskpad.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str | int) -> int:
    """
    Convert a level name to a logging level.

    Examples
    --------
    >>> _resolve_level("debug") == logging.DEBUG
    True
    >>> _resolve_level("nonsense") == logging.INFO
    True
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    *,
    log_dir: Optional[Path] = None,
    level: str | int = "INFO",
    console: bool = False,
) -> Optional[Path]:
    """
    Configure the ``taskpad`` logger.

    The full-screen UI owns the terminal, so records go to a file; one-shot
    commands may add a stderr handler for warnings.

    Parameters
    ----------
    log_dir : Optional[Path], optional
        Directory for the log file; no file handler when None.
    level : str | int, optional
        Level for the file handler (default: INFO).
    console : bool, optional
        Also log WARNING and above to stderr.

    Returns
    -------
    Optional[Path]
        Log file path, or None when no file handler could be set up.
    """
    logger = logging.getLogger("taskpad")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    log_file = None
    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_dir / LOG_FILE_NAME
            file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        except OSError:
            log_file = None
        else:
            file_handler.setLevel(_resolve_level(level))
            file_handler.setFormatter(fmt)
            logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter("taskpad: %(message)s"))
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return log_file
