# src/httpq/core/client.py
import functools
import time
import uuid
from typing import Any, Callable, NamedTuple, Optional, Sequence, Tuple, TYPE_CHECKING, Union

from .buffer import ResponseBuffer
from .config import RetryPolicy, SessionConfig
from .encoders import build_key_value_body, build_multipart_body, validate_header_lines
from .errors import (
    ConfigurationError,
    EncodingOverflowError,
    ErrorCode,
    HTTPQException,
    ResponseTooLargeError,
    TimeoutError,
    TransportError,
    error_to_string,
)
from .request import PendingRequest, RawBody
from .transport import TransportAdapter
from ..utils.sanitizer import MASK, mask_header_lines, mask_url

if TYPE_CHECKING:
    from .logging import HTTPQLogger


class PostResult(NamedTuple):
    """
    Outcome of ``execute_post``.

    ``status_code`` and ``body`` are meaningful only when ``error_code`` is OK;
    on failure they are 0 and None.
    """
    error_code: ErrorCode
    status_code: int
    body: Optional[bytes]

    @property
    def ok(self) -> bool:
        return self.error_code == ErrorCode.OK

    @property
    def text(self) -> Optional[str]:
        """Body decoded as UTF-8 (invalid bytes replaced)."""
        if self.body is None:
            return None
        return self.body.decode('utf-8', errors='replace')

    @property
    def error_message(self) -> str:
        return error_to_string(self.error_code)


def _returns_error_code(method: Callable[..., None]) -> Callable[..., ErrorCode]:
    """Turn internal exceptions of a setter into its ErrorCode result."""

    @functools.wraps(method)
    def wrapper(self: 'HTTPQClient', *args: Any, **kwargs: Any) -> ErrorCode:
        try:
            method(self, *args, **kwargs)
        except HTTPQException as e:
            if self._logger:
                self._logger.debug(
                    "Setter rejected input",
                    setter=method.__name__,
                    error=e.message,
                    error_code=int(e.error_code),
                )
            return e.error_code
        return ErrorCode.OK

    return wrapper


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}")


class HTTPQClient:
    """
    Configure-then-execute POST client.

    One instance holds one Session (transport handle, response limit,
    timeout, retry policy) and one PendingRequest. Instances are not
    thread-safe: give each thread its own client, or guard a shared one
    with a lock around the whole configure+execute sequence.

    Persistence rules:
        - Session values persist until ``reset()``.
        - After every ``execute_post()`` the header list and a multipart
          body are cleared. URL, credentials and raw or key-value bodies
          stay set and are sent again by the next execution.

    Example:
        >>> with HTTPQClient() as client:
        ...     client.set_url("https://httpbin.org/post")
        ...     client.set_key_value_body([("name", "John Smith")])
        ...     result = client.execute_post()
        >>> result.error_code, result.status_code
        (<ErrorCode.OK: 0>, 200)
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        transport: Optional[TransportAdapter] = None,
    ):
        self._config = config or SessionConfig()
        self._transport = transport or TransportAdapter(
            user_agent=self._config.user_agent,
            verify_ssl=self._config.verify_ssl,
        )
        self._request = PendingRequest()

        self._response_limit = self._config.response_limit
        self._timeout = self._config.timeout
        self._retry_policy = self._config.retry_policy

        self._logger: Optional['HTTPQLogger'] = None
        if self._config.logging:
            from .logging import HTTPQLogger
            # Своё имя на клиента: close() одного не снимает хендлеры другого
            self._logger = HTTPQLogger(
                config=self._config.logging,
                name=f"httpq.client.{id(self):x}",
            )

    def __enter__(self):
        self.init()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ==================== Session ====================

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def transport(self) -> TransportAdapter:
        return self._transport

    @property
    def pending(self) -> PendingRequest:
        """Request being configured (live object, not a copy)."""
        return self._request

    @property
    def response_limit(self) -> int:
        return self._response_limit

    @property
    def timeout(self) -> int:
        return self._timeout

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def init(self) -> ErrorCode:
        """
        Create the transport handle. Idempotent.

        Returns:
            OK, or FAILED_INIT if the HTTP engine could not be set up
        """
        try:
            self._transport.session
        except Exception as e:
            if self._logger:
                self._logger.error("Transport initialization failed", error=str(e))
            return ErrorCode.FAILED_INIT
        return ErrorCode.OK

    @_returns_error_code
    def set_response_limit(self, limit: int) -> None:
        """Capacity after which the response buffer stops growing (bytes)."""
        self._response_limit = _as_int(limit, "Response limit")

    @_returns_error_code
    def set_timeout(self, seconds: int) -> None:
        """Time limit of one attempt, 0 - unlimited."""
        self._timeout = _as_int(seconds, "Timeout")

    @_returns_error_code
    def set_retry_policy(self, policy: Union[RetryPolicy, str]) -> None:
        try:
            self._retry_policy = RetryPolicy(policy)
        except ValueError:
            raise ConfigurationError(f"Unknown retry policy: {policy!r}")

    def reset(self) -> None:
        """
        Restore session values from the config and drop all request state.

        URL, body, headers and credentials are cleared as well; the
        transport keeps its open connections.
        """
        self._response_limit = self._config.response_limit
        self._timeout = self._config.timeout
        self._retry_policy = self._config.retry_policy
        self._request.clear()
        self._transport.reset()

    def close(self) -> None:
        """Close the transport and the logger. Safe to call multiple times."""
        self._transport.close()
        if self._logger is not None:
            self._logger.close()

    # ==================== Pending request ====================

    @_returns_error_code
    def set_url(self, url: Optional[str]) -> None:
        if not isinstance(url, str) or not url:
            raise ConfigurationError("URL must be a non-empty string")
        self._request.url = url

    @_returns_error_code
    def set_raw_body(self, text: Optional[str]) -> None:
        """Body sent as is (``application/x-www-form-urlencoded`` unless overridden)."""
        if text is None:
            raise ConfigurationError("Body text is required")
        if not isinstance(text, str):
            raise ConfigurationError("Body text must be a string")
        try:
            text.encode('utf-8')
        except UnicodeEncodeError as e:
            raise EncodingOverflowError(f"Body text is not representable as UTF-8: {e}")
        self._request.body = RawBody(text)

    @_returns_error_code
    def set_key_value_body(self, pairs: Sequence[Tuple[str, str]]) -> None:
        """Body assembled as ``key=escaped_value&...`` (max 512 pairs)."""
        self._request.body = build_key_value_body(pairs)

    @_returns_error_code
    def set_multipart_body(self, entries: Sequence[Tuple[str, Optional[str], bool]]) -> None:
        """
        Multipart body from ``(name, value, is_file)`` entries (max 512).

        For ``is_file`` entries the value is a path read when the request is
        sent. The body is cleared after the next execution.
        """
        self._request.body = build_multipart_body(entries)

    @_returns_error_code
    def set_headers(self, lines: Sequence[str]) -> None:
        """Replace the header list. Cleared after the next execution."""
        self._request.headers = validate_header_lines(lines)

    def set_username(self, username: Optional[str]) -> ErrorCode:
        self._request.username = username
        return ErrorCode.OK

    def set_password(self, password: Optional[str]) -> ErrorCode:
        self._request.password = password
        return ErrorCode.OK

    # ==================== Execution ====================

    def _masked_url(self) -> str:
        mask = self._logger.config.mask if self._logger else MASK
        return mask_url(self._request.url or "", mask)

    def _attempt(self, buffer: ResponseBuffer, timeout: int) -> int:
        try:
            return self._transport.perform(self._request, timeout, buffer.write)
        except TransportError as e:
            if e.error_code == ErrorCode.WRITE_ERROR and buffer.rejected:
                raise ResponseTooLargeError(
                    size=buffer.length,
                    max_size=self._response_limit,
                    url=self._masked_url(),
                ) from e
            raise

    def execute_post(self) -> PostResult:
        """
        Send the pending request.

        A timeout forces a fresh connection for the next attempt and, under
        ``RETRY_ON_TIMEOUT``, is retried exactly once. Any other failure is
        final. Never raises for transport or configuration problems.

        Returns:
            PostResult(error_code, status_code, body)
        """
        request_id = str(uuid.uuid4())
        start_time = time.time()
        timeout = max(self._timeout, 0)
        url = self._masked_url()
        attempts = 0

        buffer = ResponseBuffer(
            limit=self._response_limit,
            initial_capacity=self._config.initial_buffer_size,
        )

        if self._logger:
            from .logging.filters import set_request_id
            set_request_id(request_id)
            self._logger.info(
                "POST started",
                url=url,
                body_kind=self._request.body_kind,
                header_count=len(self._request.headers),
                with_auth=self._request.username is not None or self._request.password is not None,
                timeout=timeout,
                retry_policy=self._retry_policy.value,
            )
            if self._request.headers and self._logger.config.log_request_headers:
                self._logger.debug(
                    "Request headers",
                    headers=mask_header_lines(self._request.headers, self._logger.config.mask),
                )

        try:
            try:
                attempts += 1
                status_code = self._attempt(buffer, timeout)
            except TimeoutError as e:
                self._transport.set_fresh_connect(True)
                if self._retry_policy is not RetryPolicy.RETRY_ON_TIMEOUT:
                    raise

                if self._logger:
                    self._logger.warning(
                        "POST timed out (will retry on a fresh connection)",
                        url=url,
                        error=e.message,
                        attempt=attempts,
                    )
                buffer.clear()
                attempts += 1
                status_code = self._attempt(buffer, timeout)
            except HTTPQException:
                self._transport.set_fresh_connect(False)
                raise
            else:
                self._transport.set_fresh_connect(False)

            body = buffer.getvalue()
            buffer.release()

            if self._logger:
                self._logger.info(
                    "POST completed",
                    url=url,
                    status_code=status_code,
                    response_size=len(body),
                    attempts=attempts,
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )

            return PostResult(ErrorCode.OK, status_code, body)

        except HTTPQException as e:
            buffer.release()

            if self._logger:
                self._logger.error(
                    "POST failed",
                    url=url,
                    error=e.message,
                    error_type=type(e).__name__,
                    error_code=int(e.error_code),
                    attempts=attempts,
                    duration_ms=round((time.time() - start_time) * 1000, 2),
                )

            return PostResult(e.error_code, 0, None)

        finally:
            self._request.consume_one_shot()
            if self._logger:
                from .logging.filters import clear_request_id
                clear_request_id()

    def error_to_string(self, code: Union[ErrorCode, int]) -> str:
        return error_to_string(code)
