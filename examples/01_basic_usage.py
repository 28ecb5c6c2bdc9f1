"""
Basic httpq Usage Examples

Demonstrates the three body kinds: raw, key-value and multipart.
"""

import tempfile

from httpq import HTTPQClient, ErrorCode


def raw_body_post():
    """POST with a body sent as is."""
    print("\n=== Raw body ===")

    with HTTPQClient() as client:
        client.set_url("https://httpbin.org/post")
        client.set_raw_body("title=My+Post&userId=1")

        result = client.execute_post()
        print(f"Result: {result.error_message}, status {result.status_code}")


def key_value_post():
    """POST with percent-encoded key=value pairs."""
    print("\n=== Key-value body ===")

    with HTTPQClient() as client:
        client.set_url("https://httpbin.org/post")
        code = client.set_key_value_body([
            ("name", "John Smith"),
            ("comment", "50% off & free"),
        ])
        if code != ErrorCode.OK:
            print(f"Cannot build body: {client.error_to_string(code)}")
            return

        result = client.execute_post()
        print(f"Status: {result.status_code}")
        print(f"Echo: {result.text}")


def multipart_post():
    """Multipart upload: one plain field and one file."""
    print("\n=== Multipart body ===")

    with tempfile.NamedTemporaryFile("w", suffix=".txt", delete=False) as f:
        f.write("hello from httpq\n")
        path = f.name

    with HTTPQClient() as client:
        client.set_url("https://httpbin.org/post")
        client.set_multipart_body([
            ("description", "test upload", False),
            ("file", path, True),
        ])

        result = client.execute_post()
        print(f"Status: {result.status_code}")

        # Multipart тело одноразовое: второй запрос уйдёт без тела
        result = client.execute_post()
        print(f"Second status: {result.status_code}")


def basic_auth_post():
    """POST with basic-auth credentials."""
    print("\n=== Basic auth ===")

    with HTTPQClient() as client:
        client.set_url("https://httpbin.org/basic-auth/user/passwd")
        client.set_username("user")
        client.set_password("passwd")

        result = client.execute_post()
        # httpbin принимает только GET: ожидаем 405, но это не ошибка транспорта
        print(f"{result.error_message}, status {result.status_code}")


if __name__ == "__main__":
    raw_body_post()
    key_value_post()
    multipart_post()
    basic_auth_post()
