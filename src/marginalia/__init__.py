"""Marginalia - highlight and annotation overlays for rich-text documents.

Stores comments and annotations as ranges over block-structured content,
keeps their inline styling in step with the text, and reports which
highlight holds the cursor.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

__version__ = "0.1.0"


def _setup_logging() -> None:
    """Configure logging to the console and, optionally, a rotating file."""
    from marginalia.config import get_settings

    config = get_settings().logging

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.level)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not config.file_logging:
        return

    config.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = config.log_dir / f"marginalia.{os.getpid()}.log"

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    logging.debug("Logging configured. Log file: %s", log_file.absolute())
