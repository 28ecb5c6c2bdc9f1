"""
Настройки логгера исполнителя запросов.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from ...utils.sanitizer import MASK

DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 5


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """json - одна запись на строку, text/colored - для терминала."""
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Куда и как пишут логгеры ``httpq.client.<id>``.

    Args:
        level: Минимальный уровень записей
        format: json, text или colored
        enable_console: Писать в stdout
        enable_file: Писать в файл с ротацией (нужен file_path)
        file_path: Путь к файлу лога
        max_bytes: Размер файла, после которого он ротируется
        backup_count: Сколько старых файлов хранить
        enable_request_id: Помечать записи одного execute_post общим id
        log_request_headers: Писать список заголовков (DEBUG, значения маскируются)
        mask: Строка, которой заменяются пароли и токены
        extra_fields: Постоянные поля каждой записи (service, env...)

    Examples:
        >>> LoggingConfig.create(level="DEBUG", format="json")
        >>> LoggingConfig.create(enable_console=False, enable_file=True, file_path="/tmp/httpq.log")
    """
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT
    enable_request_id: bool = True
    log_request_headers: bool = True
    mask: str = MASK
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")
        if not self.mask:
            raise ValueError("mask must be a non-empty string")

    @classmethod
    def create(
        cls,
        level: Union[LogLevel, str] = LogLevel.INFO,
        format: Union[LogFormat, str] = LogFormat.TEXT,
        **kwargs: Any
    ) -> "LoggingConfig":
        """
        Конструктор, принимающий уровень и формат строками в любом регистре.

        Остальные аргументы передаются как есть.
        """
        if not isinstance(level, LogLevel):
            level = LogLevel(level.upper())
        if not isinstance(format, LogFormat):
            format = LogFormat(format.lower())
        if kwargs.get('extra_fields') is None:
            kwargs.pop('extra_fields', None)
        return cls(level=level, format=format, **kwargs)
