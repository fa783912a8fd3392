"""Bidirectional codepoint iteration over borrowed UTF-8 bytes.

The iterator never copies or owns the data it walks. It tracks byte offsets
``start <= current <= end`` and the last decoded codepoint. A decode failure
sets a sticky error flag; every navigation call then raises until ``reset``.
"""

import copy
from typing import Iterator, Optional

from utf8_engine.codec.grammar import MAX_SEQUENCE_LENGTH, is_continuation_byte
from utf8_engine.codec.inputs import ByteInput, ensure_bytes, resolve_length
from utf8_engine.codec.single import decode_one
from utf8_engine.shared.errors import (
    InvalidArgumentError,
    InvalidSequenceError,
    OutOfBoundsError,
)


class CodepointIterator:
    """Cursor over the codepoints of a UTF-8 byte string.

    Args:
        data: UTF-8 bytes to walk
        length: Number of bytes to use; without it the data ends at the first NUL

    Example:
        >>> it = CodepointIterator(b"A\\xf0\\x9f\\x98\\x80B")
        >>> [hex(cp) for cp in it]
        ['0x41', '0x1f600', '0x42']
    """

    def __init__(self, data: ByteInput, length: Optional[int] = None) -> None:
        self._data = ensure_bytes(data)
        self._start = 0
        self._end = resolve_length(self._data, length)
        self._current = self._start
        self._codepoint = 0
        self._position = 0
        self._error = False

    def __repr__(self) -> str:
        return (
            f"CodepointIterator(offset={self._current}, position={self._position}, "
            f"end={self._end}, error={self._error})"
        )

    def __iter__(self) -> Iterator[int]:
        """Yield the remaining codepoints, advancing this iterator."""
        while self.next():
            yield self._codepoint

    @property
    def error(self) -> bool:
        """True once a decode failure has occurred and until ``reset``."""
        return self._error

    def _ensure_usable(self) -> None:
        if self._error:
            raise InvalidArgumentError("iterator is in an error state; call reset()")

    def has_next(self) -> bool:
        """Whether undecoded bytes remain after the current offset."""
        return not self._error and self._current < self._end

    def has_prev(self) -> bool:
        """Whether the cursor is past the start of the data."""
        return not self._error and self._current > self._start

    def next(self) -> bool:
        """Decode the codepoint at the cursor and move past it.

        Returns:
            True if a codepoint was decoded, False at the end of data

        Raises:
            InvalidArgumentError: If the iterator is in its error state
            InvalidSequenceError: If the bytes at the cursor are malformed
        """
        self._ensure_usable()
        if self._current >= self._end:
            return False

        try:
            codepoint, size = decode_one(self._data, self._current, self._end)
        except InvalidSequenceError:
            self._error = True
            raise

        self._codepoint = codepoint
        self._current += size
        self._position += 1
        return True

    def prev(self) -> bool:
        """Move back over the sequence that ends at the cursor.

        Returns:
            True if a codepoint was decoded, False at the start of data

        Raises:
            InvalidArgumentError: If the iterator is in its error state
            InvalidSequenceError: If no well-formed sequence ends at the cursor
        """
        self._ensure_usable()
        if self._current <= self._start:
            return False

        lowest = max(self._start, self._current - MAX_SEQUENCE_LENGTH)
        lead = self._current - 1
        while lead > lowest and is_continuation_byte(self._data[lead]):
            lead -= 1

        try:
            codepoint, size = decode_one(self._data, lead, self._end)
        except InvalidSequenceError:
            self._error = True
            raise

        if lead + size != self._current:
            self._error = True
            raise InvalidSequenceError(
                f"no complete sequence ends at byte {self._current}",
                position=lead, value=self._data[lead],
            )

        self._current = lead
        self._codepoint = codepoint
        self._position -= 1
        return True

    def reset(self) -> None:
        """Rewind to the start and decode the first codepoint without advancing.

        Raises:
            InvalidSequenceError: If the first sequence is malformed; the
                iterator is left in its error state
        """
        self._current = self._start
        self._position = 0
        self._codepoint = 0
        self._error = False

        if self._current < self._end:
            try:
                self._codepoint, _ = decode_one(self._data, self._current, self._end)
            except InvalidSequenceError:
                self._error = True
                raise

    def seek(self, position: int) -> None:
        """Reset, then step forward ``position`` codepoints.

        Stops silently at the end of data.

        Raises:
            OutOfBoundsError: If position is negative
            InvalidSequenceError: If a step hits malformed input
        """
        if position < 0:
            raise OutOfBoundsError(f"seek position {position} is negative", offset=position)
        self.reset()
        for _ in range(position):
            if not self.next():
                break

    def remaining(self) -> int:
        """Count codepoints from the cursor to the end, up to the first error."""
        if self._error:
            return 0
        probe = copy.copy(self)
        count = 0
        try:
            while probe.next():
                count += 1
        except InvalidSequenceError:
            return count
        return count

    def at(self, offset: int, by_byte: bool = False) -> int:
        """Peek at a codepoint relative to the cursor without moving it.

        Args:
            offset: Distance from the cursor, in bytes or codepoints
            by_byte: Interpret offset as a byte distance

        Raises:
            InvalidArgumentError: If the iterator is in its error state
            OutOfBoundsError: If the target lies outside the data
            InvalidSequenceError: If the target is not a well-formed sequence start
        """
        self._ensure_usable()

        if by_byte:
            target = self._current + offset
            if not self._start <= target < self._end:
                raise OutOfBoundsError(
                    f"byte offset {target} outside {self._start}..{self._end}",
                    offset=target, limit=self._end,
                )
            codepoint, _ = decode_one(self._data, target, self._end)
            return codepoint

        probe = copy.copy(self)
        step = probe.next if offset > 0 else probe.prev
        for _ in range(abs(offset)):
            if not step():
                raise OutOfBoundsError(
                    f"codepoint offset {offset} runs past the data",
                    offset=offset,
                )
        return probe._codepoint

    def current_codepoint(self) -> int:
        """Most recently decoded codepoint (0 before any decode)."""
        return self._codepoint

    def current_position(self) -> int:
        """Codepoint index of the cursor."""
        return self._position

    def current_offset(self) -> int:
        """Byte offset of the cursor."""
        return self._current
