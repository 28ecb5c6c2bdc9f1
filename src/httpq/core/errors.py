"""
Коды ошибок и иерархия исключений httpq.

Публичный API возвращает ErrorCode и никогда не бросает исключения.
Исключения используются только внутри ядра и конвертируются в коды
на границе API (см. HTTPQException.error_code).
"""

from enum import IntEnum
from typing import Optional, Union

import requests
from urllib3.exceptions import ReadTimeoutError

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ERROR CODES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ErrorCode(IntEnum):
    """
    Коды результата операций.

    Нумерация совместима с libcurl, чтобы коды можно было сравнивать
    с логами других клиентов; ядро от неё не зависит.
    """
    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    FAILED_INIT = 2
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_PROXY = 5
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    WRITE_ERROR = 23
    READ_ERROR = 26
    OPERATION_TIMEDOUT = 28
    HTTP_POST_ERROR = 34
    SSL_CONNECT_ERROR = 35
    BAD_FUNCTION_ARGUMENT = 43
    TOO_MANY_REDIRECTS = 47
    GOT_NOTHING = 52
    SEND_ERROR = 55
    RECV_ERROR = 56
    BAD_CONTENT_ENCODING = 61
    UNKNOWN_ERROR = 1000


_MESSAGES = {
    ErrorCode.OK: "No error",
    ErrorCode.UNSUPPORTED_PROTOCOL: "Unsupported protocol",
    ErrorCode.FAILED_INIT: "Failed initialization",
    ErrorCode.URL_MALFORMAT: "URL using bad/illegal format or missing URL",
    ErrorCode.COULDNT_RESOLVE_PROXY: "Couldn't resolve proxy name",
    ErrorCode.COULDNT_RESOLVE_HOST: "Couldn't resolve host name",
    ErrorCode.COULDNT_CONNECT: "Couldn't connect to server",
    ErrorCode.WRITE_ERROR: "Failed writing received data to disk/application",
    ErrorCode.READ_ERROR: "Failed to open/read local data from file/application",
    ErrorCode.OPERATION_TIMEDOUT: "Timeout was reached",
    ErrorCode.HTTP_POST_ERROR: "Internal problem setting up the POST",
    ErrorCode.SSL_CONNECT_ERROR: "SSL connect error",
    ErrorCode.BAD_FUNCTION_ARGUMENT: "A libcurl function was given a bad argument",
    ErrorCode.TOO_MANY_REDIRECTS: "Number of redirects hit maximum amount",
    ErrorCode.GOT_NOTHING: "Server returned nothing (no headers, no data)",
    ErrorCode.SEND_ERROR: "Failed sending data to the peer",
    ErrorCode.RECV_ERROR: "Failure when receiving data from the peer",
    ErrorCode.BAD_CONTENT_ENCODING: "Unrecognized or bad HTTP Content or Transfer-Encoding",
    ErrorCode.UNKNOWN_ERROR: "Unknown error",
}


def error_to_string(code: Union[ErrorCode, int]) -> str:
    """
    Человекочитаемое описание кода ошибки.

    Examples:
        >>> error_to_string(ErrorCode.OPERATION_TIMEDOUT)
        'Timeout was reached'
        >>> error_to_string(9999)
        'Unknown error'
    """
    try:
        return _MESSAGES[ErrorCode(code)]
    except (ValueError, KeyError):
        return _MESSAGES[ErrorCode.UNKNOWN_ERROR]

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPQException(Exception):
    """Базовое исключение httpq."""

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ КОНФИГУРАЦИИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(HTTPQException):
    """Невалидный аргумент сеттера. Состояние запроса не меняется."""
    error_code = ErrorCode.BAD_FUNCTION_ARGUMENT


class EncodingOverflowError(HTTPQException):
    """
    Собранное тело запроса не удалось представить в рабочем буфере.

    Args:
        message: Сообщение
        size: Сколько байт удалось собрать до ошибки
    """
    error_code = ErrorCode.HTTP_POST_ERROR

    def __init__(self, message: str, size: int = 0):
        self.size = size
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ТРАНСПОРТА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(HTTPQException):
    """
    Ошибка HTTP движка (DNS, connect, TLS, протокол).

    Args:
        message: Сообщение
        error_code: Код ошибки
        url: URL запроса
    """

    def __init__(self, message: str, error_code: ErrorCode, url: Optional[str] = None):
        self.url = url
        msg = message
        if url:
            msg += f" (url: {url})"
        super().__init__(msg, error_code)


class TimeoutError(TransportError):
    """
    Таймаут запроса. Единственная ошибка, после которой возможен retry.

    Args:
        message: Сообщение
        url: URL запроса
        timeout: Значение таймаута (сек)
    """

    def __init__(self, message: str, url: Optional[str] = None, timeout: Optional[int] = None):
        self.timeout = timeout
        msg = message
        if timeout:
            msg += f" ({timeout}s)"
        super().__init__(msg, ErrorCode.OPERATION_TIMEDOUT, url)


class ResponseTooLargeError(TransportError):
    """
    Ответ превысил лимит буфера.

    Args:
        size: Сколько байт было принято до отказа
        max_size: Лимит ответа
        url: URL
    """

    def __init__(self, size: int, max_size: int, url: Optional[str] = None):
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"Response too large: {size}+ bytes (max: {max_size})",
            ErrorCode.WRITE_ERROR,
            url,
        )


class FileReadError(TransportError):
    """Не удалось прочитать файл для multipart поля."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        msg = f"Cannot read upload file {path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, ErrorCode.READ_ERROR)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _is_name_resolution_failure(exc: Exception) -> bool:
    text = str(exc)
    return any(marker in text for marker in (
        "NameResolutionError",
        "Name or service not known",
        "nodename nor servname",
        "getaddrinfo failed",
        "Temporary failure in name resolution",
    ))


def classify_requests_exception(
    exc: Exception,
    url: Optional[str] = None,
    timeout: Optional[int] = None
) -> HTTPQException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Порядок проверок важен: ConnectTimeout наследует ConnectionError,
    а ProxyError и SSLError тоже являются ConnectionError.

    Examples:
        >>> exc = requests.exceptions.ReadTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert our_exc.error_code == ErrorCode.OPERATION_TIMEDOUT
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, timeout)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return TransportError("Proxy error", ErrorCode.COULDNT_RESOLVE_PROXY, url)

    elif isinstance(exc, requests.exceptions.SSLError):
        return TransportError("SSL error", ErrorCode.SSL_CONNECT_ERROR, url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        # iter_content() оборачивает ReadTimeoutError в ConnectionError
        if exc.args and isinstance(exc.args[0], ReadTimeoutError):
            return TimeoutError("Read timeout", url, timeout)
        if _is_name_resolution_failure(exc):
            return TransportError("DNS resolution failed", ErrorCode.COULDNT_RESOLVE_HOST, url)
        if "RemoteDisconnected" in str(exc):
            return TransportError("Empty reply from server", ErrorCode.GOT_NOTHING, url)
        return TransportError("Connection error", ErrorCode.COULDNT_CONNECT, url)

    elif isinstance(exc, (requests.exceptions.MissingSchema, requests.exceptions.InvalidURL)):
        return TransportError("Malformed URL", ErrorCode.URL_MALFORMAT, url)

    elif isinstance(exc, requests.exceptions.InvalidSchema):
        return TransportError("Unsupported protocol", ErrorCode.UNSUPPORTED_PROTOCOL, url)

    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        return TransportError("Too many redirects", ErrorCode.TOO_MANY_REDIRECTS, url)

    elif isinstance(exc, requests.exceptions.ContentDecodingError):
        return TransportError("Bad content encoding", ErrorCode.BAD_CONTENT_ENCODING, url)

    elif isinstance(exc, requests.exceptions.ChunkedEncodingError):
        return TransportError("Receive failure", ErrorCode.RECV_ERROR, url)

    else:
        # Неизвестная ошибка - оборачиваем
        return TransportError(f"Request failed: {exc}", ErrorCode.UNKNOWN_ERROR, url)
