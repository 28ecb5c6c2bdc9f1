"""
Конфигурация сессии httpq.

SessionConfig - immutable (frozen dataclass) набор значений по умолчанию.
Клиент копирует их в изменяемое состояние сессии и возвращается к ним
при reset().
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DEFAULTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

DEFAULT_RESPONSE_LIMIT = 4 * 1024 * 1024  # 4MB
DEFAULT_TIMEOUT = 20  # секунд, 0 - без ограничения
DEFAULT_INITIAL_BUFFER_SIZE = 8 * 1024  # 8KB
MAX_BODY_ENTRIES = 512
DEFAULT_USER_AGENT = "httpq"


class RetryPolicy(str, Enum):
    """Политика повтора запроса."""
    NO_RETRY = "no_retry"
    RETRY_ON_TIMEOUT = "retry_on_timeout"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SESSION CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class SessionConfig:
    """
    Значения сессии по умолчанию.

    Args:
        response_limit: Лимит роста буфера ответа (байты)
        timeout: Лимит времени одной попытки (сек), 0 - без ограничения
        retry_policy: Повторять ли запрос после таймаута
        initial_buffer_size: Начальный размер буфера ответа (байты)
        user_agent: Значение User-Agent (None - не отправлять)
        verify_ssl: Проверять SSL сертификаты
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> SessionConfig(timeout=5)
        >>> SessionConfig.create(response_limit=1024, retry_policy="no_retry")
    """
    response_limit: int = DEFAULT_RESPONSE_LIMIT
    timeout: int = DEFAULT_TIMEOUT
    retry_policy: RetryPolicy = RetryPolicy.RETRY_ON_TIMEOUT
    initial_buffer_size: int = DEFAULT_INITIAL_BUFFER_SIZE
    user_agent: Optional[str] = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация."""
        if self.response_limit <= 0:
            raise ValueError("response_limit must be positive")
        if self.timeout < 0:
            raise ValueError("timeout must be non-negative")
        if self.initial_buffer_size <= 0:
            raise ValueError("initial_buffer_size must be positive")
        if not isinstance(self.retry_policy, RetryPolicy):
            object.__setattr__(self, 'retry_policy', RetryPolicy(self.retry_policy))

    @classmethod
    def create(
        cls,
        response_limit: int = DEFAULT_RESPONSE_LIMIT,
        timeout: int = DEFAULT_TIMEOUT,
        retry_policy: str = RetryPolicy.RETRY_ON_TIMEOUT.value,
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'SessionConfig':
        """
        Удобный конструктор конфигурации со строковой политикой.

        Examples:
            >>> config = SessionConfig.create(timeout=60, retry_policy="no_retry")
        """
        return cls(
            response_limit=response_limit,
            timeout=timeout,
            retry_policy=RetryPolicy(retry_policy),
            logging=logging,
            **kwargs
        )

    def with_timeout(self, timeout: int) -> 'SessionConfig':
        """Новый конфиг с изменённым timeout."""
        return replace(self, timeout=timeout)

    def with_response_limit(self, response_limit: int) -> 'SessionConfig':
        """Новый конфиг с изменённым лимитом ответа."""
        return replace(self, response_limit=response_limit)

    def with_retry_policy(self, retry_policy: RetryPolicy) -> 'SessionConfig':
        """Новый конфиг с изменённой политикой повтора."""
        return replace(self, retry_policy=retry_policy)
