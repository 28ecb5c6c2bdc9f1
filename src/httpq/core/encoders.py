# src/httpq/core/encoders.py
"""
Body and header encoders.

Percent-encoding and multipart construction are delegated to ``requests``:
``requests.utils.quote`` escapes form values and the ``files=`` argument of
``requests.Session.request`` builds the multipart payload. This module only
validates caller input and shapes it for those routines.
"""
import logging
import mimetypes
import os
from contextlib import ExitStack
from typing import Any, Dict, List, Optional, Sequence, Tuple

from requests.utils import quote

from .buffer import ResponseBuffer
from .config import MAX_BODY_ENTRIES
from .errors import ConfigurationError, EncodingOverflowError, FileReadError
from .request import EncodedBody, MultipartBody, MultipartField

logger = logging.getLogger(__name__)


def percent_encode(value: str) -> str:
    """
    Escape every byte except RFC 3986 unreserved characters.

    Example:
        >>> percent_encode("1&2")
        '1%262'
    """
    return quote(value, safe="")


def _check_entry_count(entries: Optional[Sequence[Any]], what: str) -> None:
    if entries is None:
        raise ConfigurationError(f"{what} list is required")
    if isinstance(entries, (str, bytes)):
        raise ConfigurationError(f"{what} list must be a sequence of entries")
    if len(entries) > MAX_BODY_ENTRIES:
        raise ConfigurationError(
            f"Too many {what} entries: {len(entries)} (max: {MAX_BODY_ENTRIES})"
        )


def build_key_value_body(pairs: Sequence[Tuple[str, str]]) -> EncodedBody:
    """
    Assemble ``key=escaped_value&...`` from ordered pairs.

    Keys are sent as given, values are percent-encoded. Every pair is
    followed by ``&``, including the last one.

    Raises:
        ConfigurationError: Missing list, too many pairs or a malformed pair
        EncodingOverflowError: The assembled body cannot be represented as bytes

    Example:
        >>> build_key_value_body([("a", "x y"), ("b", "1&2")]).data
        b'a=x%20y&b=1%262&'
    """
    _check_entry_count(pairs, "key/value")

    escaped: List[Tuple[str, str]] = []
    for index, pair in enumerate(pairs):
        if not isinstance(pair, (tuple, list)) or len(pair) != 2:
            raise ConfigurationError(f"Pair #{index} must be (key, value)")
        key, value = pair
        if not isinstance(key, str) or not key:
            raise ConfigurationError(f"Pair #{index} has an empty key")
        if not isinstance(value, str):
            raise ConfigurationError(f"Pair #{index} ({key}) has a non-string value")
        try:
            escaped.append((key, percent_encode(value)))
        except UnicodeEncodeError as e:
            raise EncodingOverflowError(f"Cannot escape value of '{key}': {e}")

    working = ResponseBuffer(limit=None)
    for key, value in escaped:
        try:
            segment = f"{key}={value}&".encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingOverflowError(f"Key '{key}' is not representable: {e}", size=len(working))
        if working.write(segment) != len(segment):
            raise EncodingOverflowError("Working buffer refused body segment", size=len(working))

    return EncodedBody(pairs=tuple(escaped), data=working.getvalue())


def build_multipart_body(entries: Sequence[Tuple[str, Optional[str], bool]]) -> MultipartBody:
    """
    Validate ``(name, value, is_file)`` entries.

    A file entry with an empty value is skipped. File contents are read
    when the request is sent, see ``open_multipart_files``.

    Raises:
        ConfigurationError: Missing list, too many entries or a malformed entry
    """
    _check_entry_count(entries, "multipart")

    fields: List[MultipartField] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, (tuple, list)) or len(entry) != 3:
            raise ConfigurationError(f"Entry #{index} must be (name, value, is_file)")
        name, value, is_file = entry
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Entry #{index} has an empty name")

        if is_file:
            if not value:
                logger.debug("Skipping file field '%s' without a path", name)
                continue
            if not isinstance(value, str):
                raise ConfigurationError(f"Entry #{index} ({name}) path must be a string")
        elif not isinstance(value, str):
            raise ConfigurationError(f"Entry #{index} ({name}) has a non-string value")

        fields.append(MultipartField(name=name, value=value, is_file=bool(is_file)))

    return MultipartBody(fields=tuple(fields))


def open_multipart_files(body: MultipartBody, stack: ExitStack) -> List[Tuple[str, Tuple[Any, ...]]]:
    """
    Convert multipart fields to the ``files=`` form understood by requests.

    Opened files are registered on ``stack`` and closed with it.

    Raises:
        FileReadError: A file field points to an unreadable path
    """
    files: List[Tuple[str, Tuple[Any, ...]]] = []
    for item in body.fields:
        if not item.is_file:
            files.append((item.name, (None, item.value)))
            continue

        try:
            handle = stack.enter_context(open(item.value, "rb"))
        except OSError as e:
            raise FileReadError(item.value, e.strerror or str(e))

        content_type = mimetypes.guess_type(item.value)[0] or "application/octet-stream"
        files.append((item.name, (os.path.basename(item.value), handle, content_type)))

    return files


def parse_header_lines(lines: Sequence[str]) -> Dict[str, Optional[str]]:
    """
    Turn raw header lines into a mapping for requests.

    - ``"Name: value"`` sends the header
    - ``"Name:"`` removes a default header (value None)
    - ``"Name;"`` sends the header with an empty value

    Example:
        >>> parse_header_lines(["Accept:", "X-Empty;", "X-Id: 7"])
        {'Accept': None, 'X-Empty': '', 'X-Id': '7'}
    """
    headers: Dict[str, Optional[str]] = {}
    for line in lines:
        colon = line.find(":")
        if colon > 0:
            name, value = line[:colon].strip(), line[colon + 1:].strip()
            headers[name] = value if value else None
        elif line.endswith(";") and len(line) > 1:
            headers[line[:-1].strip()] = ""
        else:
            raise ConfigurationError(f"Malformed header line: {line!r}")
    return headers


def validate_header_lines(lines: Optional[Sequence[str]]) -> List[str]:
    """Check a header list and return a copy of it."""
    if lines is None:
        raise ConfigurationError("Header list is required")
    if isinstance(lines, (str, bytes)):
        raise ConfigurationError("Header list must be a sequence of strings")
    copied = list(lines)
    for line in copied:
        if not isinstance(line, str):
            raise ConfigurationError(f"Header {line!r} is not a string")
        # http.client кодирует заголовки в latin-1
        try:
            line.encode('latin-1')
        except UnicodeEncodeError:
            raise ConfigurationError(f"Header {line!r} is not latin-1 encodable")
    parse_header_lines(copied)
    return copied
