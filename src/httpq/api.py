# src/httpq/api.py
"""
Process-wide facade over one default HTTPQClient.

Mirrors the configure-then-execute call style: ``init()`` once, call the
setters, ``execute_post()``. Every call takes a module lock; use
``exclusive()`` to keep other threads out for a whole configure+execute
sequence.

Example:
    >>> import httpq.api as httpq
    >>> httpq.init()
    >>> httpq.set_url("https://example.com/form")
    >>> httpq.set_key_value_body([("name", "John"), ("city", "New York")])
    >>> error_code, status, body = httpq.execute_post()
"""
import atexit
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Tuple, Union

from .core.client import HTTPQClient, PostResult
from .core.config import RetryPolicy, SessionConfig
from .core.errors import ErrorCode
from .core.errors import error_to_string as _error_to_string

_lock = threading.RLock()
_client: Optional[HTTPQClient] = None
_atexit_registered = False


def init(config: Optional[SessionConfig] = None) -> ErrorCode:
    """
    Create the default client and its transport handle. Idempotent.

    ``config`` is only used by the call that creates the client.
    """
    global _client, _atexit_registered

    with _lock:
        if _client is None:
            _client = HTTPQClient(config=config)
        result = _client.init()
        if result != ErrorCode.OK:
            _client = None
            return result
        if not _atexit_registered:
            atexit.register(shutdown)
            _atexit_registered = True
        return result


def shutdown() -> None:
    """Close the default client. ``init()`` may be called again afterwards."""
    global _client

    with _lock:
        if _client is not None:
            _client.close()
            _client = None


def default_client() -> Optional[HTTPQClient]:
    return _client


@contextmanager
def exclusive() -> Iterator[HTTPQClient]:
    """
    Hold the facade lock across several calls.

    Raises:
        RuntimeError: If ``init()`` has not been called
    """
    with _lock:
        if _client is None:
            raise RuntimeError("httpq is not initialized, call init() first")
        yield _client


def _call(method: str, *args) -> ErrorCode:
    with _lock:
        if _client is None:
            return ErrorCode.FAILED_INIT
        return getattr(_client, method)(*args)


def set_url(url: str) -> ErrorCode:
    return _call("set_url", url)


def set_raw_body(text: str) -> ErrorCode:
    return _call("set_raw_body", text)


def set_key_value_body(pairs: Sequence[Tuple[str, str]]) -> ErrorCode:
    return _call("set_key_value_body", pairs)


def set_multipart_body(entries: Sequence[Tuple[str, Optional[str], bool]]) -> ErrorCode:
    return _call("set_multipart_body", entries)


def set_headers(lines: Sequence[str]) -> ErrorCode:
    return _call("set_headers", lines)


def set_username(username: str) -> ErrorCode:
    return _call("set_username", username)


def set_password(password: str) -> ErrorCode:
    return _call("set_password", password)


def set_response_limit(limit: int) -> ErrorCode:
    return _call("set_response_limit", limit)


def set_timeout(seconds: int) -> ErrorCode:
    return _call("set_timeout", seconds)


def set_retry_policy(policy: Union[RetryPolicy, str]) -> ErrorCode:
    return _call("set_retry_policy", policy)


def execute_post() -> PostResult:
    """Run the pending request on the default client."""
    with _lock:
        if _client is None:
            return PostResult(ErrorCode.FAILED_INIT, 0, None)
        return _client.execute_post()


def reset() -> None:
    with _lock:
        if _client is not None:
            _client.reset()


def error_to_string(code: Union[ErrorCode, int]) -> str:
    return _error_to_string(code)
