"""Pending request state: URL, body variant, headers and credentials."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class RawBody:
    """Body sent verbatim."""
    text: str

    kind = "raw"


@dataclass(frozen=True)
class EncodedBody:
    """
    ``application/x-www-form-urlencoded`` body.

    Attributes:
        pairs: (key, escaped value) pairs in caller order
        data: Assembled ``key=value&`` bytes
    """
    pairs: Tuple[Tuple[str, str], ...]
    data: bytes

    kind = "key_value"


@dataclass(frozen=True)
class MultipartField:
    """One multipart entry: a plain value or a path to upload."""
    name: str
    value: str
    is_file: bool = False


@dataclass(frozen=True)
class MultipartBody:
    fields: Tuple[MultipartField, ...]

    kind = "multipart"


Body = Union[RawBody, EncodedBody, MultipartBody]


@dataclass
class PendingRequest:
    """
    One POST being configured.

    Persistence after execution:
        - ``headers`` and a ``MultipartBody`` are cleared (one-shot)
        - ``url``, credentials, ``RawBody`` and ``EncodedBody`` persist (sticky)

    Only ``HTTPQClient.reset()`` clears everything.
    """
    url: Optional[str] = None
    body: Optional[Body] = None
    headers: List[str] = field(default_factory=list)
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def body_kind(self) -> Optional[str]:
        return self.body.kind if self.body is not None else None

    def consume_one_shot(self):
        """Release the parts that only live for one execution."""
        self.headers = []
        if isinstance(self.body, MultipartBody):
            self.body = None

    def clear(self):
        self.url = None
        self.body = None
        self.headers = []
        self.username = None
        self.password = None
