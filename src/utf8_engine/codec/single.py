"""Bounded decoding of exactly one UTF-8 sequence."""

from typing import Optional, Tuple

from utf8_engine.shared.errors import InvalidSequenceError, OutOfBoundsError

from .grammar import (
    ASCII_MAX,
    CONTINUATION_VALUE_MASK,
    classify_lead_byte,
    is_continuation_byte,
)
from .inputs import ByteInput, ensure_bytes


def decode_one(
    data: ByteInput,
    start: int = 0,
    end: Optional[int] = None,
) -> Tuple[int, int]:
    """Decode the sequence beginning at ``start`` without reading past ``end``.

    Args:
        data: Bytes to read from
        start: Offset of the lead byte
        end: Exclusive upper bound of the readable window, len(data) if None

    Returns:
        Tuple of (codepoint, sequence length in bytes)

    Raises:
        OutOfBoundsError: If the window is empty or outside data
        InvalidSequenceError: If the bytes at start are not a well-formed sequence
    """
    view = ensure_bytes(data)
    if end is None:
        end = len(view)
    if not 0 <= end <= len(view):
        raise OutOfBoundsError(
            f"window end {end} outside 0..{len(view)}", offset=end, limit=len(view)
        )
    if not 0 <= start < end:
        raise OutOfBoundsError(
            f"start {start} outside window 0..{end}", offset=start, limit=end
        )

    first = view[start]
    if first <= ASCII_MAX:
        return first, 1

    lead = classify_lead_byte(first)
    if lead is None:
        raise InvalidSequenceError(
            f"invalid lead byte {first:#04x} at {start}", position=start, value=first
        )
    if start + lead.length > end:
        raise InvalidSequenceError(
            f"truncated sequence at {start}: needs {lead.length} bytes, "
            f"{end - start} available",
            position=start, value=first,
        )

    codepoint = lead.seed
    for index in range(start + 1, start + lead.length):
        byte = view[index]
        if not is_continuation_byte(byte):
            raise InvalidSequenceError(
                f"invalid continuation byte {byte:#04x} at {index}",
                position=index, value=byte,
            )
        if index == start + 1 and not lead.first_min <= byte <= lead.first_max:
            raise InvalidSequenceError(
                f"overlong, surrogate or out-of-range sequence at {start}",
                position=index, value=byte,
            )
        codepoint = (codepoint << 6) | (byte & CONTINUATION_VALUE_MASK)

    return codepoint, lead.length
