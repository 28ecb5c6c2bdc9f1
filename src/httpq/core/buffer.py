# src/httpq/core/buffer.py
"""
Growable byte buffer for response bodies.

The buffer is filled by the transport in chunks of arbitrary size without
knowing the total length up front. It keeps an explicit capacity/length
pair and a trailing NUL byte after the content, so the invariant
``capacity >= length + 1`` holds after every write.
"""
from typing import Optional

from .config import DEFAULT_INITIAL_BUFFER_SIZE


class ResponseBuffer:
    """
    Response accumulator with a growth ceiling.

    Growth policy: when a chunk of ``n`` bytes does not fit
    (``capacity - length < n + 1``) the buffer grows by ``2 * (n + 1)``,
    but only while ``capacity`` is still below ``limit``. Once the
    capacity has reached the limit, a chunk that does not fit is rejected
    and ``write`` returns 0; the caller must treat that as a short write.

    The limit bounds growth, not content: the last permitted growth step
    may take the capacity past the limit.

    Example:
        >>> buf = ResponseBuffer(limit=1024)
        >>> buf.write(b"hello")
        5
        >>> buf.getvalue()
        b'hello'
    """

    GROWTH_FACTOR = 2

    def __init__(self, limit: Optional[int] = None, initial_capacity: int = DEFAULT_INITIAL_BUFFER_SIZE):
        """
        Args:
            limit: Capacity after which the buffer stops growing (None - unlimited)
            initial_capacity: First allocation; clamped to ``limit`` so small limits apply
        """
        if limit is not None:
            initial_capacity = min(initial_capacity, limit)
        initial_capacity = max(initial_capacity, 1)

        self.limit = limit
        self._data: Optional[bytearray] = bytearray(initial_capacity)
        self._capacity = initial_capacity
        self._length = 0
        self._rejected = False

    @property
    def capacity(self) -> int:
        """Allocated bytes, terminator included."""
        return self._capacity

    @property
    def length(self) -> int:
        """Logical content length, terminator excluded."""
        return self._length

    @property
    def rejected(self) -> bool:
        """True if at least one chunk was refused since the last clear."""
        return self._rejected

    def __len__(self) -> int:
        return self._length

    def _can_grow(self) -> bool:
        return self.limit is None or self._capacity < self.limit

    def write(self, chunk: bytes) -> int:
        """
        Append a chunk.

        Args:
            chunk: Bytes delivered by the transport

        Returns:
            Number of bytes consumed: ``len(chunk)`` or 0 if the chunk was rejected
        """
        if self._data is None:
            raise ValueError("write to a released buffer")

        size = len(chunk)
        if self._capacity - self._length < size + 1:
            if not self._can_grow():
                self._rejected = True
                return 0
            grow_by = self.GROWTH_FACTOR * (size + 1)
            self._data.extend(bytes(grow_by))
            self._capacity += grow_by

        end = self._length + size
        self._data[self._length:end] = chunk
        self._data[end] = 0
        self._length = end
        return size

    def getvalue(self) -> bytes:
        """Content without the terminator."""
        if self._data is None:
            raise ValueError("buffer has been released")
        return bytes(self._data[:self._length])

    def raw(self) -> memoryview:
        """Content followed by the NUL terminator."""
        if self._data is None:
            raise ValueError("buffer has been released")
        return memoryview(self._data)[:self._length + 1]

    def clear(self):
        """Drop content, keep the current allocation."""
        if self._data is None:
            raise ValueError("buffer has been released")
        self._length = 0
        self._data[0] = 0
        self._rejected = False

    def release(self):
        """Free the storage. Safe to call multiple times."""
        self._data = None
        self._capacity = 0
        self._length = 0
