"""
Environment configuration for httpq.

Example:
    >>> from httpq.core.env_config import load_from_env
    >>> config = load_from_env()
    >>> client = HTTPQClient(config=config)
"""

from .loader import load_from_env, print_config_summary
from .validator import HTTPQSettings

__all__ = [
    "load_from_env",
    "print_config_summary",
    "HTTPQSettings",
]
