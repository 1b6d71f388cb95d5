"""
Logging setup for command-line entry points.

Call setup_logging() once at the entry point. Library modules only use
``logger = logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LoggingSettings


def setup_logging(
    settings: Optional[LoggingSettings] = None,
    level: Optional[str] = None,
) -> None:
    """
    Configure the root logger from LoggingSettings.

    Args:
        settings: Logging section of Settings (defaults used if None)
        level: Optional level name overriding settings.level (e.g. "DEBUG")
    """
    settings = settings or LoggingSettings()
    root = logging.getLogger()

    # Avoid duplicate handlers on repeated calls
    if root.handlers:
        return

    level_name = (level or settings.level).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    formatter = logging.Formatter(settings.format)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    file_cfg = settings.file or {}
    if file_cfg.get("enabled"):
        log_path = Path(file_cfg.get("path", "logs/crossmarket.log"))
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_path),
            maxBytes=int(file_cfg.get("max_bytes", 10485760)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
