"""Logging utilities for the CLI and release pipeline modules."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence


DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "dmgdist.log"

_SECRET_FLAGS = frozenset({"-p", "--password"})
REDACTED = "******"


def configure_logging(log_file: Path, level: int = logging.INFO) -> logging.Logger:
    """Configure process-wide console and file logging."""

    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = logging.Formatter(fmt=DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    root_logger.addHandler(stream_handler)
    root_logger.addHandler(file_handler)

    logger = logging.getLogger("dmgdist")
    logger.setLevel(level)
    return logger


def redact_command(args: Sequence[str]) -> str:
    """Render a command line for logs with password arguments masked."""

    rendered: list[str] = []
    mask_next = False
    for arg in args:
        if mask_next:
            rendered.append(REDACTED)
            mask_next = False
            continue
        rendered.append(arg)
        mask_next = arg in _SECRET_FLAGS
    return " ".join(rendered)
