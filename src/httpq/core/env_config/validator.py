"""
Pydantic validators for environment configuration.
"""

from typing import Optional, Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_INITIAL_BUFFER_SIZE, DEFAULT_RESPONSE_LIMIT, DEFAULT_TIMEOUT


class HTTPQSettings(BaseSettings):
    """
    Session defaults read from environment variables.

    Reads from:
    1. Environment variables (HTTPQ_*)
    2. .env file
    3. Defaults

    Example .env file:
        HTTPQ_RESPONSE_LIMIT=1048576
        HTTPQ_TIMEOUT=10
        HTTPQ_RETRY_POLICY=no_retry
        HTTPQ_LOG_ENABLED=true
        HTTPQ_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix='HTTPQ_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Session
    response_limit: int = Field(default=DEFAULT_RESPONSE_LIMIT, gt=0, description="Response buffer ceiling (bytes)")
    timeout: int = Field(default=DEFAULT_TIMEOUT, ge=0, description="Per-attempt time limit (sec), 0 - unlimited")
    retry_policy: Literal["no_retry", "retry_on_timeout"] = Field(default="retry_on_timeout")
    initial_buffer_size: int = Field(default=DEFAULT_INITIAL_BUFFER_SIZE, gt=0)
    user_agent: Optional[str] = Field(default="httpq")
    verify_ssl: bool = Field(default=True)

    # Logging
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = Field(default=None, validate_default=True)
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_request_id: bool = Field(default=True)
    log_request_headers: bool = Field(default=True, description="Log masked request headers at DEBUG")

    @field_validator('retry_policy', mode='before')
    @classmethod
    def normalize_retry_policy(cls, v):
        """Accept NO_RETRY / Retry-On-Timeout spellings."""
        if isinstance(v, str):
            return v.strip().lower().replace('-', '_')
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('log_file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """file_path is required when file logging is on."""
        if info.data.get('log_enable_file') and not v:
            raise ValueError("log_file_path is required when log_enable_file=True")
        return v
