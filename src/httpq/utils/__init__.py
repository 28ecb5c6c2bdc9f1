"""Вспомогательные утилиты."""

from .sanitizer import mask_sensitive_data, mask_url, mask_header_lines

__all__ = [
    "mask_sensitive_data",
    "mask_url",
    "mask_header_lines",
]
