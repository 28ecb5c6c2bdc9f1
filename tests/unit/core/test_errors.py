"""Tests for error codes and exception classification."""

import pytest
import requests
from urllib3.exceptions import ReadTimeoutError

from httpq.core.errors import (
    ConfigurationError,
    EncodingOverflowError,
    ErrorCode,
    FileReadError,
    HTTPQException,
    ResponseTooLargeError,
    TimeoutError,
    TransportError,
    classify_requests_exception,
    error_to_string,
)


class TestErrorToString:

    def test_known_codes(self):
        assert error_to_string(ErrorCode.OK) == "No error"
        assert error_to_string(ErrorCode.OPERATION_TIMEDOUT) == "Timeout was reached"
        assert error_to_string(28) == "Timeout was reached"

    def test_every_code_has_a_message(self):
        for code in ErrorCode:
            assert error_to_string(code)

    def test_unknown_code(self):
        assert error_to_string(9999) == "Unknown error"
        assert error_to_string(-1) == "Unknown error"

    def test_codes_match_libcurl_numbering(self):
        assert ErrorCode.WRITE_ERROR == 23
        assert ErrorCode.BAD_FUNCTION_ARGUMENT == 43
        assert ErrorCode.HTTP_POST_ERROR == 34


class TestExceptions:

    def test_error_codes(self):
        assert ConfigurationError("bad").error_code == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert EncodingOverflowError("too big").error_code == ErrorCode.HTTP_POST_ERROR
        assert TimeoutError("slow", "https://x").error_code == ErrorCode.OPERATION_TIMEDOUT
        assert ResponseTooLargeError(10, 5).error_code == ErrorCode.WRITE_ERROR
        assert FileReadError("/tmp/x").error_code == ErrorCode.READ_ERROR

    def test_hierarchy(self):
        assert issubclass(TimeoutError, TransportError)
        assert issubclass(ResponseTooLargeError, TransportError)
        assert issubclass(TransportError, HTTPQException)
        assert issubclass(ConfigurationError, HTTPQException)

    def test_messages(self):
        exc = TimeoutError("Request timeout", "https://api.example.com", 20)
        assert "Request timeout (20s)" in str(exc)
        assert "https://api.example.com" in str(exc)

        exc = ResponseTooLargeError(size=1020, max_size=1024, url="https://x")
        assert exc.size == 1020
        assert exc.max_size == 1024
        assert "max: 1024" in str(exc)


class TestClassifyRequestsException:

    @pytest.mark.parametrize("exc, code", [
        (requests.exceptions.ReadTimeout(), ErrorCode.OPERATION_TIMEDOUT),
        (requests.exceptions.ConnectTimeout(), ErrorCode.OPERATION_TIMEDOUT),
        (requests.exceptions.ProxyError(), ErrorCode.COULDNT_RESOLVE_PROXY),
        (requests.exceptions.SSLError(), ErrorCode.SSL_CONNECT_ERROR),
        (requests.exceptions.ConnectionError("Connection refused"), ErrorCode.COULDNT_CONNECT),
        (requests.exceptions.ConnectionError("Failed to resolve: Name or service not known"),
         ErrorCode.COULDNT_RESOLVE_HOST),
        (requests.exceptions.ConnectionError("RemoteDisconnected('closed')"), ErrorCode.GOT_NOTHING),
        (requests.exceptions.MissingSchema(), ErrorCode.URL_MALFORMAT),
        (requests.exceptions.InvalidURL(), ErrorCode.URL_MALFORMAT),
        (requests.exceptions.InvalidSchema(), ErrorCode.UNSUPPORTED_PROTOCOL),
        (requests.exceptions.TooManyRedirects(), ErrorCode.TOO_MANY_REDIRECTS),
        (requests.exceptions.ContentDecodingError(), ErrorCode.BAD_CONTENT_ENCODING),
        (requests.exceptions.ChunkedEncodingError(), ErrorCode.RECV_ERROR),
        (requests.exceptions.RequestException("boom"), ErrorCode.UNKNOWN_ERROR),
    ])
    def test_mapping(self, exc, code):
        our_exc = classify_requests_exception(exc, "https://api.example.com")
        assert our_exc.error_code == code

    def test_read_timeout_while_streaming(self):
        inner = ReadTimeoutError(None, "https://api.example.com", "Read timed out.")
        exc = requests.exceptions.ConnectionError(inner)

        our_exc = classify_requests_exception(exc, "https://api.example.com", timeout=5)

        assert isinstance(our_exc, TimeoutError)
        assert our_exc.timeout == 5
