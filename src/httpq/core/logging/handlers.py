"""
Console and rotating file handlers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Sequence

from .config import LoggingConfig, DEFAULT_LOG_BACKUP_COUNT, DEFAULT_LOG_MAX_BYTES


def _attach(
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]]
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or ():
        handler.addFilter(f)
    return handler


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]] = None
) -> logging.StreamHandler:
    return _attach(logging.StreamHandler(sys.stdout), level, formatter, filters)


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = DEFAULT_LOG_MAX_BYTES,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
    filters: Optional[Sequence[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Rotating file handler; the parent directory is created if missing.

    httpq.log is the current file, httpq.log.1 ... httpq.log.N the rotated ones.
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    return _attach(handler, level, formatter, filters)


def build_handlers(
    config: LoggingConfig,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]] = None
) -> List[logging.Handler]:
    """Handlers enabled by ``config``, in console-then-file order."""
    level = getattr(logging, config.level.value)
    handlers: List[logging.Handler] = []

    if config.enable_console:
        handlers.append(create_console_handler(level, formatter, filters))
    if config.enable_file and config.file_path:
        handlers.append(create_file_handler(
            config.file_path,
            level,
            formatter,
            max_bytes=config.max_bytes,
            backup_count=config.backup_count,
            filters=filters,
        ))
    return handlers
