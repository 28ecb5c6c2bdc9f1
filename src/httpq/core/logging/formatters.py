"""
Log formatters: JSON, plain text and colored text.

Fields passed through ``extra`` (url, status_code, error_code, attempt...)
are appended to the output by every formatter.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Type, Union

from .config import LogFormat

# Attributes every LogRecord has; anything else came from ``extra``
_RESERVED = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'taskName', 'exc_info', 'exc_text', 'stack_info',
    'asctime',
})


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to the record via ``extra``."""
    return {
        key: value for key, value in record.__dict__.items()
        if key not in _RESERVED and not key.startswith('_')
    }


def _format_pairs(fields: Dict[str, Any]) -> str:
    parts: List[str] = [f"{key}={value}" for key, value in fields.items()]
    return " ".join(parts)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123000+00:00", "level": "INFO",
         "logger": "httpq", "message": "POST completed", "status_code": 200}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(extra_fields(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Plain text: ``[timestamp] [level] [logger] message key=value ...``
    """

    FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
    DATEFMT = '%Y-%m-%d %H:%M:%S'

    def __init__(self):
        super().__init__(fmt=self.FORMAT, datefmt=self.DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        base_msg = super().format(record)
        fields = extra_fields(record)
        if fields:
            base_msg += " " + _format_pairs(fields)
        return base_msg


class ColoredFormatter(TextFormatter):
    """Text formatter with ANSI-colored level names."""

    # cyan, green, yellow, red, bold red
    COLORS = dict(zip(
        ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'),
        ('36', '32', '33', '31', '1;31'),
    ))

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        code = self.COLORS.get(original)
        if code:
            record.levelname = f"\033[{code}m{original}\033[0m"
        try:
            return super().format(record)
        finally:
            record.levelname = original


FORMATTERS: Dict[LogFormat, Type[logging.Formatter]] = {
    LogFormat.JSON: JSONFormatter,
    LogFormat.TEXT: TextFormatter,
    LogFormat.COLORED: ColoredFormatter,
}


def get_formatter(format_type: Union[LogFormat, str]) -> logging.Formatter:
    """
    Formatter instance for ``json``, ``text`` or ``colored``.

    Raises:
        ValueError: Unknown format name
    """
    try:
        key = format_type if isinstance(format_type, LogFormat) else LogFormat(format_type.lower())
    except ValueError:
        raise ValueError(
            f"Unknown format type: {format_type!r} "
            f"(expected one of: {', '.join(f.value for f in LogFormat)})"
        )
    return FORMATTERS[key]()
