"""
Structured logger used by the request executor.
"""

import logging
from typing import Any, Dict, List, Optional

from .config import LoggingConfig
from .filters import ExtraFieldsFilter, RequestIdFilter
from .formatters import get_formatter
from .handlers import build_handlers
from ...utils.sanitizer import mask_sensitive_data


class HTTPQLogger:
    """
    Stdlib logger wired from a LoggingConfig.

    Keyword arguments of ``debug``/``info``/``warning``/``error`` become
    record fields. Values under sensitive keys (password, authorization,
    token...) and bearer/basic credentials inside strings are replaced by
    ``config.mask`` before the record is created.

    Example:
        >>> log = HTTPQLogger(LoggingConfig.create(level="DEBUG"), name="httpq.client")
        >>> log.info("POST completed", status_code=200, attempts=1)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "httpq"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, self.config.level.value))
        self._logger.propagate = False

        # A second HTTPQLogger with the same name takes over the logger
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)

        filters: List[logging.Filter] = []
        if self.config.enable_request_id:
            filters.append(RequestIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format)
        for handler in build_handlers(self.config, formatter, filters):
            self._logger.addHandler(handler)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _emit(self, level: int, message: str, fields: Dict[str, Any]) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra=mask_sensitive_data(fields, self.config.mask))

    def debug(self, message: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self._emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._emit(logging.ERROR, message, fields)

    def close(self) -> None:
        """Flush, close and detach all handlers. Idempotent."""
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            except (OSError, ValueError):
                # Stream already closed by the interpreter
                pass
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def configure_logging(config: LoggingConfig, name: str = "httpq") -> HTTPQLogger:
    """Shortcut for ``HTTPQLogger(config, name)``."""
    return HTTPQLogger(config=config, name=name)
