"""
Timeouts, retry policy and response limit.
"""

from httpq import HTTPQClient, RetryPolicy, SessionConfig


def retry_on_timeout():
    """A timed-out attempt is repeated once on a fresh connection."""
    print("\n=== Retry on timeout ===")

    config = SessionConfig(timeout=2, retry_policy=RetryPolicy.RETRY_ON_TIMEOUT)
    with HTTPQClient(config=config) as client:
        client.set_url("https://httpbin.org/delay/5")
        result = client.execute_post()
        print(f"Result: {result.error_message}")
        print(f"Next attempt uses fresh connection: {client.transport.fresh_connect}")


def no_retry():
    print("\n=== No retry ===")

    with HTTPQClient() as client:
        client.set_timeout(2)
        client.set_retry_policy(RetryPolicy.NO_RETRY)
        client.set_url("https://httpbin.org/delay/5")
        print(f"Result: {client.execute_post().error_message}")


def response_limit():
    """Responses that outgrow the limit fail with WRITE_ERROR."""
    print("\n=== Response limit ===")

    with HTTPQClient() as client:
        client.set_url("https://httpbin.org/anything")
        client.set_raw_body("x" * 10000)
        client.set_response_limit(1024)

        result = client.execute_post()
        print(f"Small limit: {result.error_message}")

        client.reset()
        client.set_url("https://httpbin.org/anything")
        client.set_raw_body("x" * 10000)
        result = client.execute_post()
        print(f"After reset: {result.error_message}, {len(result.body or b'')} bytes")


if __name__ == "__main__":
    retry_on_timeout()
    no_retry()
    response_limit()
