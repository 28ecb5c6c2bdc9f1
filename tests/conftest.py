"""
Pytest configuration and fixtures for httpq tests.
"""

import pytest
import responses as responses_lib

from httpq import api
from httpq.core.client import HTTPQClient
from httpq.core.logging.config import LoggingConfig


@pytest.fixture
def post_url():
    """Endpoint used by mocked requests."""
    return "https://api.example.com/submit"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    """Initialized client with default session values."""
    client = HTTPQClient()
    client.init()
    yield client
    client.close()


@pytest.fixture
def logging_config_with_file(tmp_path):
    """JSON logging into a temporary file."""
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(tmp_path / "httpq.log")
    )


@pytest.fixture
def fresh_api():
    """Module facade without a default client, shut down afterwards."""
    api.shutdown()
    yield api
    api.shutdown()
