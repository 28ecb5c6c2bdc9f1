# example_usage.py

import httpq.api as httpq
from httpq import ErrorCode


def main():
    # Один раз на процесс
    if httpq.init() != ErrorCode.OK:
        raise SystemExit("httpq init failed")

    httpq.set_url("https://httpbin.org/post")
    httpq.set_key_value_body([("name", "John Smith"), ("city", "New York")])
    httpq.set_headers(["Accept: application/json"])

    print("\n=== First POST ===")
    error_code, status, body = httpq.execute_post()
    if error_code != ErrorCode.OK:
        print(f"Failed: {httpq.error_to_string(error_code)}")
        return
    print(f"Status: {status}")
    print(f"Body: {body[:200]!r}")

    # URL и тело остаются, заголовки уже сброшены
    print("\n=== Second POST (same body, no headers) ===")
    error_code, status, _ = httpq.execute_post()
    print(f"{httpq.error_to_string(error_code)}, status {status}")

    httpq.shutdown()

if __name__ == "__main__":
    main()
