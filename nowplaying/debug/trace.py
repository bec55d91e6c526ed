"""
Logging setup.

All modules log through `logging.getLogger(__name__)` under the
`nowplaying` namespace; this wires that namespace to the console and an
optional log file.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "nowplaying"


def setup_logging(
    level: int = logging.INFO,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """
    Configure logging for nowplaying.

    Args:
        level: Logging level.
        log_file: Optional file to write logs to.

    Returns:
        The package root logger.
    """
    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Configure root logger
    root_logger = logging.getLogger(LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
