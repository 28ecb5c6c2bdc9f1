"""Tests for HTTPQClient setters, persistence and reset."""

import pytest

from httpq.core.client import HTTPQClient
from httpq.core.config import RetryPolicy, SessionConfig
from httpq.core.errors import ErrorCode
from httpq.core.request import EncodedBody, MultipartBody, RawBody


class TestInit:

    def test_init_is_idempotent(self):
        client = HTTPQClient()
        try:
            assert client.init() == ErrorCode.OK
            session = client.transport.session
            assert client.init() == ErrorCode.OK
            assert client.transport.session is session
        finally:
            client.close()

    def test_context_manager_closes_transport(self):
        with HTTPQClient() as client:
            assert client.transport.is_open
        assert not client.transport.is_open


class TestSetters:

    def test_set_url(self, client):
        assert client.set_url("https://api.example.com") == ErrorCode.OK
        assert client.pending.url == "https://api.example.com"

    @pytest.mark.parametrize("url", ["", None, 42])
    def test_set_url_rejects(self, client, url):
        client.set_url("https://keep.example.com")

        assert client.set_url(url) == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.pending.url == "https://keep.example.com"

    def test_set_raw_body(self, client):
        assert client.set_raw_body("a=1&b=2") == ErrorCode.OK
        assert client.pending.body == RawBody("a=1&b=2")

    def test_set_raw_body_rejects_none(self, client):
        assert client.set_raw_body(None) == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.pending.body is None

    def test_set_raw_body_rejects_unencodable_text(self, client):
        client.set_raw_body("keep")

        assert client.set_raw_body("bad \ud800") == ErrorCode.HTTP_POST_ERROR
        assert client.pending.body == RawBody("keep")

    def test_set_key_value_body(self, client):
        assert client.set_key_value_body([("a", "x y")]) == ErrorCode.OK
        assert isinstance(client.pending.body, EncodedBody)
        assert client.pending.body.data == b"a=x%20y&"

    def test_set_key_value_body_too_many_pairs(self, client):
        client.set_raw_body("keep")
        pairs = [(f"k{i}", "v") for i in range(513)]

        assert client.set_key_value_body(pairs) == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.pending.body == RawBody("keep")

    def test_set_key_value_body_encoding_overflow(self, client):
        assert client.set_key_value_body([("a", "\ud800")]) == ErrorCode.HTTP_POST_ERROR
        assert client.pending.body is None

    def test_body_variants_replace_each_other(self, client):
        client.set_raw_body("raw")
        client.set_multipart_body([("a", "b", False)])
        assert isinstance(client.pending.body, MultipartBody)

        client.set_key_value_body([("a", "b")])
        assert isinstance(client.pending.body, EncodedBody)

        client.set_raw_body("raw again")
        assert client.pending.body == RawBody("raw again")

    def test_multipart_bound_keeps_existing_state(self, client):
        assert client.set_multipart_body([("first", "1", False)]) == ErrorCode.OK
        before = client.pending.body

        entries = [(f"f{i}", "v", False) for i in range(513)]
        assert client.set_multipart_body(entries) == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.pending.body is before

    def test_multipart_malformed_entry_keeps_existing_state(self, client):
        client.set_multipart_body([("first", "1", False)])
        before = client.pending.body

        assert client.set_multipart_body([("ok", "1", False), ("bad", None, False)]) == \
            ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.pending.body is before

    def test_set_headers_replaces_list(self, client):
        client.set_headers(["A: 1", "B: 2"])
        client.set_headers(["C: 3"])

        assert client.pending.headers == ["C: 3"]

    def test_set_headers_rejects_none(self, client):
        client.set_headers(["A: 1"])

        assert client.set_headers(None) == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.pending.headers == ["A: 1"]

    def test_set_headers_rejects_non_latin1(self, client):
        client.set_headers(["A: 1"])

        assert client.set_headers(["X-Name: привет"]) == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.pending.headers == ["A: 1"]

    def test_credentials_stored_verbatim(self, client):
        assert client.set_username("") == ErrorCode.OK
        assert client.set_password("p@ss:word") == ErrorCode.OK

        assert client.pending.username == ""
        assert client.pending.password == "p@ss:word"

    def test_session_setters_accept_integers(self, client):
        assert client.set_response_limit(1024) == ErrorCode.OK
        assert client.set_timeout(0) == ErrorCode.OK
        assert client.set_retry_policy(RetryPolicy.NO_RETRY) == ErrorCode.OK

        assert client.response_limit == 1024
        assert client.timeout == 0
        assert client.retry_policy is RetryPolicy.NO_RETRY

    def test_session_setters_coerce_numeric_strings(self, client):
        assert client.set_timeout("5") == ErrorCode.OK
        assert client.set_response_limit("2048") == ErrorCode.OK

        assert client.timeout == 5
        assert client.response_limit == 2048

    @pytest.mark.parametrize("value", [None, "abc", "1.5", 2j, True, object()])
    def test_session_setters_reject_non_integers(self, client, value):
        defaults = SessionConfig()

        assert client.set_timeout(value) == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.set_response_limit(value) == ErrorCode.BAD_FUNCTION_ARGUMENT

        assert client.timeout == defaults.timeout
        assert client.response_limit == defaults.response_limit

    def test_set_retry_policy_by_value(self, client):
        assert client.set_retry_policy("no_retry") == ErrorCode.OK
        assert client.retry_policy is RetryPolicy.NO_RETRY

    def test_set_retry_policy_unknown(self, client):
        assert client.set_retry_policy("always") == ErrorCode.BAD_FUNCTION_ARGUMENT
        assert client.retry_policy is RetryPolicy.RETRY_ON_TIMEOUT


class TestReset:

    def test_restores_defaults(self, client):
        client.set_timeout(5)
        client.set_retry_policy(RetryPolicy.NO_RETRY)
        client.set_response_limit(10)

        client.reset()

        assert client.timeout == 20
        assert client.retry_policy is RetryPolicy.RETRY_ON_TIMEOUT
        assert client.response_limit == 4 * 1024 * 1024

    def test_reset_twice(self, client):
        client.set_timeout(5)
        client.reset()
        client.reset()

        assert client.timeout == 20

    def test_clears_pending_request(self, client):
        client.set_url("https://api.example.com")
        client.set_raw_body("x")
        client.set_headers(["A: 1"])
        client.set_username("user")
        client.set_password("pw")

        client.reset()

        pending = client.pending
        assert pending.url is None
        assert pending.body is None
        assert pending.headers == []
        assert pending.username is None
        assert pending.password is None

    def test_clears_fresh_connect(self, client):
        client.transport.set_fresh_connect(True)
        client.reset()
        assert client.transport.fresh_connect is False

    def test_restores_configured_values(self):
        config = SessionConfig(timeout=3, retry_policy=RetryPolicy.NO_RETRY)
        with HTTPQClient(config=config) as client:
            client.set_timeout(60)
            client.reset()

            assert client.timeout == 3
            assert client.retry_policy is RetryPolicy.NO_RETRY
