"""httpq - configure-then-execute HTTP(S) POST client."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.client import HTTPQClient, PostResult
from .core.config import RetryPolicy, SessionConfig
from .core.buffer import ResponseBuffer
from .core.errors import (
    ErrorCode,
    error_to_string,
    HTTPQException,
    ConfigurationError,
    EncodingOverflowError,
    TransportError,
    TimeoutError,
    ResponseTooLargeError,
    FileReadError,
)
from .core.env_config import load_from_env
from .core.logging import LoggingConfig

# Users can configure logging themselves using logging.getLogger('httpq')
logging.getLogger('httpq').addHandler(logging.NullHandler())

try:
    __version__ = version("httpq")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "HTTPQClient",
    "PostResult",
    "ResponseBuffer",

    # Config
    "SessionConfig",
    "RetryPolicy",
    "LoggingConfig",
    "load_from_env",

    # Errors
    "ErrorCode",
    "error_to_string",
    "HTTPQException",
    "ConfigurationError",
    "EncodingOverflowError",
    "TransportError",
    "TimeoutError",
    "ResponseTooLargeError",
    "FileReadError",

    # Version
    "__version__",
]
