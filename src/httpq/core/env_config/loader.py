"""
Build SessionConfig from environment variables and .env files.
"""

from typing import Optional

from ..config import RetryPolicy, SessionConfig
from ..logging.config import LoggingConfig, LogFormat, LogLevel
from .validator import HTTPQSettings


def load_from_env(env_file: Optional[str] = None, **overrides) -> SessionConfig:
    """
    Load SessionConfig from environment.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (same names as HTTPQSettings fields)
    2. Environment variables (HTTPQ_*)
    3. .env file
    4. Defaults

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(env_file=".env.production", timeout=5)
    """
    settings = HTTPQSettings(_env_file=env_file or '.env')
    values = settings.model_dump()
    values.update(overrides)

    logging_config = None
    if values['log_enabled']:
        logging_config = LoggingConfig(
            level=LogLevel(str(values['log_level']).upper()),
            format=LogFormat(values['log_format']),
            enable_console=values['log_enable_console'],
            enable_file=values['log_enable_file'],
            file_path=values['log_file_path'],
            max_bytes=values['log_max_bytes'],
            backup_count=values['log_backup_count'],
            enable_request_id=values['log_enable_request_id'],
            log_request_headers=values['log_request_headers'],
        )

    return SessionConfig(
        response_limit=values['response_limit'],
        timeout=values['timeout'],
        retry_policy=RetryPolicy(values['retry_policy']),
        initial_buffer_size=values['initial_buffer_size'],
        user_agent=values['user_agent'],
        verify_ssl=values['verify_ssl'],
        logging=logging_config,
    )


def print_config_summary(config: SessionConfig):
    """Print configuration summary."""
    print("SessionConfig:")
    print(f"  response_limit: {config.response_limit} bytes")
    print(f"  timeout: {config.timeout}s")
    print(f"  retry_policy: {config.retry_policy.value}")
    print(f"  initial_buffer_size: {config.initial_buffer_size} bytes")
    print(f"  verify_ssl: {config.verify_ssl}")

    if config.logging:
        print(f"  logging: level={config.logging.level.value}, format={config.logging.format.value}")
        if config.logging.enable_file:
            print(f"    file: {config.logging.file_path}")
