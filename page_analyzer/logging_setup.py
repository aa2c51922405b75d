"""Logging configuration helpers for the page analyzer service."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path(os.getenv("APP_LOG_DIR", "logs"))
DEFAULT_LOG_FILE = os.getenv("APP_LOG_FILENAME", "page-analyzer.log")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

# Request-level chatter from the HTTP client drowns out the probe summaries.
NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def _normalise_level(level: Optional[str | int]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = level.strip().upper()
        if value.isdigit():
            return int(value)
        mapped = logging.getLevelName(value)
        if isinstance(mapped, int):
            return mapped
    return logging.INFO


def configure_logging(level: Optional[str | int] = None, log_dir: Optional[Path] = None) -> Path:
    """Send log records to the console and to a per-run log file.

    The file is truncated on every call. Its path is returned so the caller
    can report where diagnostics end up.
    """

    log_level = _normalise_level(level)
    target_dir = log_dir or DEFAULT_LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / DEFAULT_LOG_FILE

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_path, mode="w", encoding="utf-8"),
        ],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logging.getLogger(__name__).info("Application logs initialised at %s", log_path)
    return log_path
