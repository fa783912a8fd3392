"""Growable, always-valid UTF-8 string buffer.

``Utf8String`` owns one ``bytearray`` whose length is the buffer capacity.
After every operation the stored bytes are well-formed UTF-8, followed by a
NUL at ``byte_len``, and ``codepoint_len`` matches the number of sequences.
Mutations validate their input before touching the buffer, so a failed call
leaves the contents unchanged.
"""

from typing import Iterable, Iterator, Optional

from utf8_engine.codec.decoder import decode
from utf8_engine.codec.encoder import encode, encode_codepoint
from utf8_engine.codec.grammar import NUL_BYTE, NUL_CODEPOINT, is_continuation_byte
from utf8_engine.codec.inputs import ByteInput, cstring_length, ensure_bytes
from utf8_engine.codec.single import decode_one
from utf8_engine.shared.config import BufferConfig
from utf8_engine.shared.errors import (
    InvalidArgumentError,
    InvalidSequenceError,
    OutOfBoundsError,
    OutOfMemoryError,
)
from utf8_engine.shared.logging import get_logger

from .iterator import CodepointIterator
from .utils import length_in_codepoints

logger = get_logger(__name__, component="buffer")


class Utf8String:
    """Owned UTF-8 text with amortized growth.

    Args:
        data: Initial UTF-8 bytes; copied, validated and cut at the first NUL
        config: Growth settings, defaults to ``BufferConfig()``

    Raises:
        InvalidArgumentError: If data is not bytes-like
        InvalidSequenceError: If data is not well-formed UTF-8
        OutOfMemoryError: If storage cannot be allocated

    Example:
        >>> s = Utf8String(b"caf\\xc3\\xa9")
        >>> s.byte_len, s.codepoint_len
        (5, 4)
    """

    def __init__(self, data: ByteInput = b"", config: Optional[BufferConfig] = None) -> None:
        self._config = config or BufferConfig()
        view = ensure_bytes(data)
        size = cstring_length(view)
        count = length_in_codepoints(view, size)

        max_capacity = self._config.max_capacity
        if max_capacity is not None and size + 1 > max_capacity:
            raise OutOfMemoryError(
                f"{size + 1} bytes exceeds max_capacity {max_capacity}",
                requested=size + 1,
            )
        self._data = self._allocate(max(self._config.min_capacity, size + 1))
        self._data[:size] = view[:size]
        self._byte_len = size
        self._codepoint_len = count

    # Construction

    @classmethod
    def with_capacity(
        cls, capacity: int, config: Optional[BufferConfig] = None
    ) -> "Utf8String":
        """Create an empty buffer holding at least ``capacity`` bytes."""
        if capacity < 0:
            raise InvalidArgumentError(f"capacity must be >= 0, got {capacity}")
        instance = cls(b"", config)
        instance.reserve(capacity)
        return instance

    @classmethod
    def from_codepoints(
        cls, codepoints: Iterable[int], config: Optional[BufferConfig] = None
    ) -> "Utf8String":
        """Build a buffer by encoding scalar values (stops at the first 0)."""
        return cls(encode(codepoints), config)

    @classmethod
    def from_text(cls, text: str, config: Optional[BufferConfig] = None) -> "Utf8String":
        """Build a buffer from a Python string."""
        if not isinstance(text, str):
            raise InvalidArgumentError(f"text must be str, got {type(text).__name__}")
        try:
            encoded = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidSequenceError(
                f"text contains an unencodable character at index {e.start}",
                position=e.start, value=ord(text[e.start]),
            ) from e
        return cls(encoded, config)

    @classmethod
    def concat(cls, first: "Utf8String", second: "Utf8String") -> "Utf8String":
        """Return a new buffer holding ``first`` followed by ``second``."""
        _require_string(first, "first")
        _require_string(second, "second")
        result = cls.with_capacity(first.byte_len + second.byte_len + 1, first._config)
        result.append(first)
        result.append(second)
        return result

    def copy(self) -> "Utf8String":
        """Deep copy with the same capacity."""
        duplicate = Utf8String(b"", self._config)
        duplicate._data = bytearray(self._data)
        duplicate._byte_len = self._byte_len
        duplicate._codepoint_len = self._codepoint_len
        return duplicate

    def move_from(self, source: "Utf8String") -> "Utf8String":
        """Take over the storage of ``source``, leaving it empty but usable."""
        _require_string(source, "source")
        if source is self:
            return self
        self._data = source._data
        self._byte_len = source._byte_len
        self._codepoint_len = source._codepoint_len
        self._config = source._config

        source._data = bytearray(1)
        source._byte_len = 0
        source._codepoint_len = 0
        return self

    # Properties

    @property
    def byte_len(self) -> int:
        return self._byte_len

    @property
    def codepoint_len(self) -> int:
        return self._codepoint_len

    @property
    def capacity(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytes:
        """Stored bytes, without the terminator."""
        return bytes(self._data[:self._byte_len])

    def as_cstring(self) -> bytes:
        """Stored bytes including the trailing NUL."""
        return bytes(self._data[:self._byte_len + 1])

    def is_empty(self) -> bool:
        return self._byte_len == 0

    # Storage management

    def _allocate(self, size: int) -> bytearray:
        try:
            return bytearray(size)
        except MemoryError as e:
            raise OutOfMemoryError(
                f"cannot allocate {size} bytes", requested=size
            ) from e

    def _ensure_capacity(self, needed: int) -> None:
        current = self.capacity
        if current >= needed:
            return

        new_capacity = current or self._config.min_capacity
        while new_capacity < needed:
            new_capacity *= self._config.growth_factor

        max_capacity = self._config.max_capacity
        if max_capacity is not None and new_capacity > max_capacity:
            if needed > max_capacity:
                raise OutOfMemoryError(
                    f"{needed} bytes exceeds max_capacity {max_capacity}",
                    requested=needed,
                )
            new_capacity = max_capacity

        try:
            self._data.extend(bytes(new_capacity - current))
        except MemoryError as e:
            raise OutOfMemoryError(
                f"cannot grow buffer to {new_capacity} bytes", requested=new_capacity
            ) from e

        logger.debug(
            f"Grew buffer from {current} to {new_capacity} bytes",
            extra={"needed": needed},
        )

    def reserve(self, capacity: int) -> None:
        """Grow storage so at least ``capacity`` bytes are available."""
        if capacity <= self.capacity:
            return
        self._ensure_capacity(capacity)

    def shrink_to_fit(self) -> None:
        """Release storage beyond the contents and terminator."""
        needed = self._byte_len + 1
        if needed < self.capacity:
            del self._data[needed:]

    def clear(self) -> None:
        """Empty the buffer, keeping its capacity."""
        self._data[0] = NUL_BYTE
        self._byte_len = 0
        self._codepoint_len = 0

    # Appending

    def _append_span(self, span: bytes, count: int) -> None:
        if not span:
            return
        end = self._byte_len + len(span)
        self._ensure_capacity(end + 1)
        self._data[self._byte_len:end] = span
        self._data[end] = NUL_BYTE
        self._byte_len = end
        self._codepoint_len += count

    def append(self, other: "Utf8String") -> None:
        """Append the contents of another buffer."""
        _require_string(other, "other")
        span = other.data
        self._append_span(span, length_in_codepoints(span, len(span)))

    def append_bytes(self, data: ByteInput) -> None:
        """Append UTF-8 bytes, cut at their first NUL.

        Raises:
            InvalidSequenceError: If the bytes are not well-formed UTF-8
        """
        view = ensure_bytes(data)
        size = cstring_length(view)
        count = length_in_codepoints(view, size)
        self._append_span(bytes(view[:size]), count)

    def append_codepoint(self, codepoint: int) -> None:
        """Append one scalar value.

        Raises:
            InvalidSequenceError: If codepoint is U+0000, a surrogate or out of range
        """
        self._append_span(_encode_stored_codepoint(codepoint), 1)

    def __add__(self, other: "Utf8String") -> "Utf8String":
        if not isinstance(other, Utf8String):
            return NotImplemented
        return Utf8String.concat(self, other)

    # Inserting

    def _byte_offset_for(self, offset: int, by_byte: bool) -> int:
        if by_byte:
            if not 0 <= offset <= self._byte_len:
                raise OutOfBoundsError(
                    f"byte offset {offset} outside 0..{self._byte_len}",
                    offset=offset, limit=self._byte_len + 1,
                )
            if offset < self._byte_len and is_continuation_byte(self._data[offset]):
                raise InvalidSequenceError(
                    f"byte offset {offset} is inside a sequence",
                    position=offset, value=self._data[offset],
                )
            return offset

        if not 0 <= offset <= self._codepoint_len:
            raise OutOfBoundsError(
                f"codepoint offset {offset} outside 0..{self._codepoint_len}",
                offset=offset, limit=self._codepoint_len + 1,
            )
        if offset == self._codepoint_len:
            return self._byte_len

        iterator = CodepointIterator(self._data, self._byte_len)
        for _ in range(offset):
            iterator.next()
        return iterator.current_offset()

    def _insert_span(self, byte_offset: int, span: bytes, count: int) -> None:
        if not span:
            return
        size = len(span)
        self._ensure_capacity(self._byte_len + size + 1)
        tail = self._data[byte_offset:self._byte_len + 1]
        self._data[byte_offset + size:self._byte_len + size + 1] = tail
        self._data[byte_offset:byte_offset + size] = span
        self._byte_len += size
        self._codepoint_len += count

    def insert_codepoint(self, offset: int, codepoint: int, by_byte: bool = False) -> None:
        """Insert one scalar value at a codepoint (or byte) offset."""
        byte_offset = self._byte_offset_for(offset, by_byte)
        self._insert_span(byte_offset, _encode_stored_codepoint(codepoint), 1)

    def insert_bytes(self, offset: int, data: ByteInput, by_byte: bool = False) -> None:
        """Insert UTF-8 bytes, cut at their first NUL, at an offset."""
        byte_offset = self._byte_offset_for(offset, by_byte)
        view = ensure_bytes(data)
        size = cstring_length(view)
        count = length_in_codepoints(view, size)
        self._insert_span(byte_offset, bytes(view[:size]), count)

    def insert(self, offset: int, other: "Utf8String", by_byte: bool = False) -> None:
        """Insert the contents of another buffer at an offset."""
        _require_string(other, "other")
        byte_offset = self._byte_offset_for(offset, by_byte)
        self._insert_span(byte_offset, other.data, other.codepoint_len)

    # Slicing and access

    def substring(self, start: int, length: int) -> "Utf8String":
        """Codepoint slice ``[start, start + length)``, clamped at the end."""
        if not 0 <= start < self._codepoint_len:
            raise OutOfBoundsError(
                f"start {start} outside 0..{self._codepoint_len}",
                offset=start, limit=self._codepoint_len,
            )
        if length < 0:
            raise OutOfBoundsError(f"length {length} is negative", offset=length)
        if length == 0:
            return Utf8String(b"", self._config)

        codepoints = decode(self.data)
        return Utf8String(encode(codepoints[start:start + length]), self._config)

    def substring_bytes(self, start: int, length: int) -> "Utf8String":
        """Byte slice ``[start, start + length)``, clamped at the end.

        Raises:
            InvalidSequenceError: If the slice cuts through a sequence
        """
        if not 0 <= start < self._byte_len:
            raise OutOfBoundsError(
                f"start byte {start} outside 0..{self._byte_len}",
                offset=start, limit=self._byte_len,
            )
        if length < 0:
            raise OutOfBoundsError(f"length {length} is negative", offset=length)
        if length == 0:
            return Utf8String(b"", self._config)

        end = min(start + length, self._byte_len)
        return Utf8String(bytes(self._data[start:end]), self._config)

    def at(self, offset: int, by_byte: bool = False) -> int:
        """Codepoint at a codepoint (or byte) offset."""
        if by_byte:
            if not 0 <= offset < self._byte_len:
                raise OutOfBoundsError(
                    f"byte offset {offset} outside 0..{self._byte_len}",
                    offset=offset, limit=self._byte_len,
                )
            codepoint, _ = decode_one(self._data, offset, self._byte_len)
            return codepoint

        if not 0 <= offset < self._codepoint_len:
            raise OutOfBoundsError(
                f"codepoint offset {offset} outside 0..{self._codepoint_len}",
                offset=offset, limit=self._codepoint_len,
            )
        iterator = CodepointIterator(self._data, self._byte_len)
        for _ in range(offset + 1):
            iterator.next()
        return iterator.current_codepoint()

    # Python protocol

    def __len__(self) -> int:
        return self._codepoint_len

    def __bytes__(self) -> bytes:
        return self.data

    def __str__(self) -> str:
        return self.data.decode("utf-8")

    def __repr__(self) -> str:
        return (
            f"Utf8String({self.data!r}, codepoint_len={self._codepoint_len}, "
            f"capacity={self.capacity})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Utf8String):
            return NotImplemented
        return self.data == other.data

    __hash__ = None  # type: ignore[assignment]

    def __iter__(self) -> Iterator[int]:
        return iter(CodepointIterator(self.data))


def _require_string(value: object, argument: str) -> None:
    if not isinstance(value, Utf8String):
        raise InvalidArgumentError(
            f"{argument} must be a Utf8String, got {type(value).__name__}"
        )


def _encode_stored_codepoint(codepoint: int) -> bytes:
    if isinstance(codepoint, int) and codepoint == NUL_CODEPOINT:
        raise InvalidSequenceError(
            "U+0000 cannot be stored in a NUL-terminated string", value=codepoint
        )
    return encode_codepoint(codepoint)
