"""
Logging system for httpq.

Example:
    >>> from httpq.core.logging import LoggingConfig
    >>> from httpq import HTTPQClient, SessionConfig
    >>>
    >>> config = SessionConfig(logging=LoggingConfig.create(level="DEBUG", format="json"))
    >>> client = HTTPQClient(config=config)
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import HTTPQLogger, configure_logging
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    RequestIdFilter,
    ExtraFieldsFilter,
    set_request_id,
    get_request_id,
    clear_request_id,
)
from .handlers import build_handlers, create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "HTTPQLogger",
    "configure_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "RequestIdFilter",
    "ExtraFieldsFilter",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    # Handlers
    "build_handlers",
    "create_console_handler",
    "create_file_handler",
]
