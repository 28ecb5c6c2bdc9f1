"""Core httpq модули."""

from .config import (
    RetryPolicy,
    SessionConfig,
    DEFAULT_RESPONSE_LIMIT,
    DEFAULT_TIMEOUT,
    DEFAULT_INITIAL_BUFFER_SIZE,
    MAX_BODY_ENTRIES,
)
from .buffer import ResponseBuffer
from .request import PendingRequest, RawBody, EncodedBody, MultipartBody, MultipartField
from .transport import TransportAdapter
from .client import HTTPQClient, PostResult
from .errors import (
    ErrorCode,
    error_to_string,
    HTTPQException,
    ConfigurationError,
    EncodingOverflowError,
    TransportError,
    TimeoutError,
    ResponseTooLargeError,
    FileReadError,
    classify_requests_exception,
)

__all__ = [
    # Config
    "RetryPolicy",
    "SessionConfig",
    "DEFAULT_RESPONSE_LIMIT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_INITIAL_BUFFER_SIZE",
    "MAX_BODY_ENTRIES",
    # Core
    "ResponseBuffer",
    "PendingRequest",
    "RawBody",
    "EncodedBody",
    "MultipartBody",
    "MultipartField",
    "TransportAdapter",
    "HTTPQClient",
    "PostResult",
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
    "classify_requests_exception",
]
