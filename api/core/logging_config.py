"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)` using short
`event_name key=value` messages; this module only wires handlers.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def log_file() -> str | None:
    return os.environ.get("LOG_FILE", "").strip() or None


def setup_logging(level: str | None = None, logfile: str | None = None) -> None:
    """
    Attach a console handler (and optionally a file handler) to the root logger.

    Does nothing when the root logger already has handlers, so repeated app
    construction in tests or under a reloader does not duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, (level or log_level()).upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    path = logfile or log_file()
    if path:
        log_path = Path(path).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
