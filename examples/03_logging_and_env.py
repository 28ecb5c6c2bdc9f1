"""
Logging and environment configuration.
"""

import os

from httpq import HTTPQClient, LoggingConfig, SessionConfig, load_from_env
from httpq.core.env_config import print_config_summary


def json_logging():
    """Structured JSON logs; passwords and tokens are masked."""
    print("\n=== JSON logging ===")

    config = SessionConfig(logging=LoggingConfig.create(level="DEBUG", format="json"))
    with HTTPQClient(config=config) as client:
        client.set_url("https://httpbin.org/post?token=not-in-logs")
        client.set_headers(["Authorization: Bearer not-in-logs-either"])
        client.set_key_value_body([("name", "John")])
        client.execute_post()


def from_environment():
    """Session defaults from HTTPQ_* variables."""
    print("\n=== Environment config ===")

    os.environ["HTTPQ_TIMEOUT"] = "5"
    os.environ["HTTPQ_RETRY_POLICY"] = "no_retry"
    os.environ["HTTPQ_LOG_ENABLED"] = "true"
    os.environ["HTTPQ_LOG_FORMAT"] = "colored"

    config = load_from_env()
    print_config_summary(config)

    with HTTPQClient(config=config) as client:
        client.set_url("https://httpbin.org/post")
        client.execute_post()


if __name__ == "__main__":
    json_logging()
    from_environment()
