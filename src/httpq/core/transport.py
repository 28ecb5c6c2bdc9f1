# src/httpq/core/transport.py
"""
Transport adapter over ``requests.Session``.

The adapter owns one session for the lifetime of the client so that
connection setup is amortized across requests. It exposes only what the
executor needs: perform one POST while streaming the body into a sink,
force a fresh connection for the next attempt, reset option state and
close.
"""
import time
from contextlib import ExitStack
from typing import Any, Callable, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from requests.exceptions import RequestException

from .encoders import open_multipart_files, parse_header_lines
from .errors import ErrorCode, TimeoutError, TransportError, classify_requests_exception
from .request import EncodedBody, MultipartBody, PendingRequest, RawBody
from ..utils.sanitizer import mask_url

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Receives one chunk, returns how many bytes it consumed
WriteFunction = Callable[[bytes], int]


class TransportAdapter:
    """
    Narrow wrapper around the HTTP engine.

    Example:
        >>> transport = TransportAdapter()
        >>> buf = ResponseBuffer()
        >>> status = transport.perform(request, timeout=20, write=buf.write)
        >>> transport.close()
    """

    def __init__(
        self,
        user_agent: Optional[str] = "httpq",
        verify_ssl: bool = True,
        chunk_size: int = 8192,
    ):
        self.user_agent = user_agent
        self.verify_ssl = verify_ssl
        self.chunk_size = chunk_size
        self._session: Optional[requests.Session] = None
        self._fresh_connect = False
        self._last_status: Optional[int] = None

    def _create_session(self) -> requests.Session:
        """Create configured session."""
        session = requests.Session()

        # Ретраи делает executor, а не urllib3
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        self._apply_default_headers(session)
        return session

    def _apply_default_headers(self, session: requests.Session):
        session.headers = requests.utils.default_headers()
        if self.user_agent:
            session.headers['User-Agent'] = self.user_agent
        else:
            del session.headers['User-Agent']

    @property
    def session(self) -> requests.Session:
        """Lazily created session."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def fresh_connect(self) -> bool:
        return self._fresh_connect

    @property
    def last_status(self) -> Optional[int]:
        """HTTP status of the last completed transfer."""
        return self._last_status

    def set_fresh_connect(self, enabled: bool):
        """Force (or stop forcing) a new connection on the next perform."""
        self._fresh_connect = enabled

    def _drop_connections(self):
        for adapter in self.session.adapters.values():
            adapter.close()

    def _check_deadline(self, deadline: Optional[float], safe_url: str, timeout: int):
        if deadline is not None and time.monotonic() > deadline:
            raise TimeoutError("Operation timed out", safe_url, timeout)

    def _build_kwargs(self, request: PendingRequest, stack: ExitStack) -> Dict[str, Any]:
        headers: Dict[str, Optional[str]] = {}
        kwargs: Dict[str, Any] = {}

        body = request.body
        if isinstance(body, RawBody):
            kwargs['data'] = body.text.encode('utf-8')
            headers['Content-Type'] = FORM_CONTENT_TYPE
        elif isinstance(body, EncodedBody):
            kwargs['data'] = body.data
            headers['Content-Type'] = FORM_CONTENT_TYPE
        elif isinstance(body, MultipartBody):
            kwargs['files'] = open_multipart_files(body, stack)
        else:
            kwargs['data'] = b""

        # Заголовки пользователя перекрывают дефолтные
        headers.update(parse_header_lines(request.headers))
        kwargs['headers'] = headers

        if request.username is not None or request.password is not None:
            kwargs['auth'] = HTTPBasicAuth(request.username or "", request.password or "")

        return kwargs

    def perform(self, request: PendingRequest, timeout: int, write: WriteFunction) -> int:
        """
        Send one POST and stream the response body into ``write``.

        Args:
            request: Pending request to send
            timeout: Limit for the whole transfer (sec), 0 - unlimited.
                Connect and each socket read are also capped at ``timeout``;
                the elapsed time is checked once the response arrives, after
                every chunk and before returning, so a transfer that ran
                past ``timeout`` is reported as a timeout even when the
                last byte came in late.
            write: Sink for body chunks

        Returns:
            HTTP status code

        Raises:
            TransportError: Any engine failure, WRITE_ERROR when the sink
                consumed less than a whole chunk
            TimeoutError: The transfer exceeded ``timeout``
        """
        self._last_status = None
        url = request.url
        if not url:
            raise TransportError("No URL set", ErrorCode.URL_MALFORMAT)

        # URL может содержать user:password@, в сообщения об ошибках - только маскированный
        safe_url = mask_url(url)

        if self._fresh_connect:
            self._drop_connections()

        deadline = time.monotonic() + timeout if timeout else None
        request_timeout = (timeout, timeout) if timeout else None

        with ExitStack() as stack:
            try:
                kwargs = self._build_kwargs(request, stack)
                response = self.session.post(
                    url,
                    timeout=request_timeout,
                    stream=True,
                    allow_redirects=False,
                    verify=self.verify_ssl,
                    **kwargs
                )
            except RequestException as e:
                raise classify_requests_exception(e, safe_url, timeout)
            except (UnicodeError, ValueError) as e:
                # Тело, заголовки или Basic-креденшелы не кодируются
                raise TransportError(
                    f"Cannot send request: {e}", ErrorCode.HTTP_POST_ERROR, safe_url
                )

            stack.callback(response.close)
            self._check_deadline(deadline, safe_url, timeout)

            received = 0
            try:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if not chunk:
                        continue
                    self._check_deadline(deadline, safe_url, timeout)
                    consumed = write(chunk)
                    if consumed != len(chunk):
                        raise TransportError(
                            f"Failure writing output after {received} bytes",
                            ErrorCode.WRITE_ERROR,
                            safe_url,
                        )
                    received += consumed
            except RequestException as e:
                raise classify_requests_exception(e, safe_url, timeout)

            self._check_deadline(deadline, safe_url, timeout)
            self._last_status = response.status_code
            return response.status_code

    def reset(self):
        """Return the handle to a clean option state; live connections are kept."""
        self._fresh_connect = False
        self._last_status = None
        if self._session is not None:
            self._apply_default_headers(self._session)

    def close(self):
        """Close the session. Safe to call multiple times."""
        if self._session is not None:
            try:
                self._session.close()
            finally:
                self._session = None
