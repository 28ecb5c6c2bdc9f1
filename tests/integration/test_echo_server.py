"""
End-to-end tests against a local threaded HTTP server.
"""

import json
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs

import pytest

from httpq.core.client import HTTPQClient
from httpq.core.config import RetryPolicy, SessionConfig
from httpq.core.errors import ErrorCode

pytestmark = pytest.mark.integration


class EchoHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _send(self, status, payload: bytes, content_type="application/json"):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def do_POST(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.server.hits[self.path] = self.server.hits.get(self.path, 0) + 1

        if self.path.startswith("/status/"):
            status = int(self.path.rsplit("/", 1)[1])
            self._send(status, b"" if status == 204 else b"status")
        elif self.path == "/slow-once":
            if self.server.hits[self.path] == 1:
                time.sleep(2)
            self._send(200, b"finally")
        elif self.path == "/big":
            self._send(200, b"b" * 2048, "text/plain")
        else:
            form = {}
            if self.headers.get("Content-Type", "").startswith("application/x-www-form-urlencoded"):
                form = {k: v[0] for k, v in parse_qs(body.decode("utf-8")).items()}
            payload = {
                "headers": dict(self.headers.items()),
                "body": body.decode("latin-1"),
                "form": form,
            }
            self._send(200, json.dumps(payload).encode("utf-8"))


@pytest.fixture(scope="module")
def echo_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    server.daemon_threads = True
    server.hits = {}
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}", server
    server.shutdown()
    server.server_close()


@pytest.fixture
def base_url(echo_server):
    return echo_server[0]


def _echo(result):
    assert result.error_code == ErrorCode.OK
    return json.loads(result.body)


def test_key_value_form_roundtrip(client, base_url):
    client.set_url(f"{base_url}/echo")
    client.set_key_value_body([("name", "John Smith"), ("city", "New York"), ("q", "a&b=c")])

    echoed = _echo(client.execute_post())

    assert echoed["form"] == {"name": "John Smith", "city": "New York", "q": "a&b=c"}


@pytest.mark.parametrize("status", [200, 204, 404, 503])
def test_status_passthrough(client, base_url, status):
    client.set_url(f"{base_url}/status/{status}")

    result = client.execute_post()

    assert result.error_code == ErrorCode.OK
    assert result.status_code == status


def test_headers_cleared_between_executions(client, base_url):
    client.set_url(f"{base_url}/echo")
    client.set_headers(["X-Once: yes"])

    first = _echo(client.execute_post())
    second = _echo(client.execute_post())

    assert first["headers"]["X-Once"] == "yes"
    assert "X-Once" not in second["headers"]


def test_non_latin1_header_is_not_sent(client, base_url):
    client.set_url(f"{base_url}/echo")
    client.pending.headers = ["X-Name: привет"]

    assert client.execute_post() == (ErrorCode.HTTP_POST_ERROR, 0, None)

    # Заголовки одноразовые, следующий запрос уходит нормально
    echoed = _echo(client.execute_post())
    assert "X-Name" not in echoed["headers"]


def test_multipart_upload(client, base_url, tmp_path):
    upload = tmp_path / "data.csv"
    upload.write_text("id,value\n1,42\n")
    client.set_url(f"{base_url}/echo")
    client.set_multipart_body([("kind", "csv", False), ("file", str(upload), True)])

    echoed = _echo(client.execute_post())

    assert echoed["headers"]["Content-Type"].startswith("multipart/form-data")
    assert "id,value\n1,42\n" in echoed["body"]
    assert 'filename="data.csv"' in echoed["body"]


def test_response_limit(client, base_url):
    client.set_url(f"{base_url}/big")
    client.set_response_limit(1024)

    assert client.execute_post() == (ErrorCode.WRITE_ERROR, 0, None)

    client.set_response_limit(4096)
    result = client.execute_post()
    assert result.ok
    assert len(result.body) == 2048


def test_timeout_retried_on_fresh_connection(echo_server):
    base_url, server = echo_server
    server.hits.pop("/slow-once", None)

    with HTTPQClient(SessionConfig(timeout=1)) as client:
        client.set_url(f"{base_url}/slow-once")
        result = client.execute_post()

    assert result == (ErrorCode.OK, 200, b"finally")
    assert server.hits["/slow-once"] == 2


def test_timeout_without_retry(echo_server):
    base_url, server = echo_server
    server.hits.pop("/slow-once", None)

    with HTTPQClient(SessionConfig(timeout=1, retry_policy=RetryPolicy.NO_RETRY)) as client:
        client.set_url(f"{base_url}/slow-once")
        result = client.execute_post()

    assert result == (ErrorCode.OPERATION_TIMEDOUT, 0, None)
    assert server.hits["/slow-once"] == 1


def test_connection_refused():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]

    with HTTPQClient(SessionConfig(timeout=2)) as client:
        client.set_url(f"http://127.0.0.1:{port}/")
        result = client.execute_post()

    assert result.error_code == ErrorCode.COULDNT_CONNECT
