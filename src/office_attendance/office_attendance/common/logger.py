"""Logging helpers.

Every module asks for its logger through :func:`get_logger`, which attaches a
console handler and, when ``LOG_FILE`` is configured, a file handler.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME = "office_attendance"


def configure_logging(*, level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package root logger once; later calls only adjust the level."""

    root = logging.getLogger(_ROOT_NAME)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if root.handlers:
        return root

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(Path(log_file), mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            # If file logging fails, just log to console
            root.warning("Cannot open log file %s: %s", log_file, e)

    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Child logger of the package root, e.g. ``get_logger("attendance.service")``."""

    if not logging.getLogger(_ROOT_NAME).handlers:
        configure_logging(level=os.getenv("LOG_LEVEL", "INFO"), log_file=os.getenv("LOG_FILE") or None)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")
