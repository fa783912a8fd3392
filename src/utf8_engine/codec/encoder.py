"""Scalar value to UTF-8 encoding."""

from typing import Iterable, Optional

from utf8_engine.shared.errors import (
    InvalidArgumentError,
    InvalidSequenceError,
    OutOfBoundsError,
)

from .grammar import (
    CONTINUATION_PATTERN,
    CONTINUATION_VALUE_MASK,
    FOUR_BYTE_PATTERN,
    MAX_CODEPOINT,
    NUL_CODEPOINT,
    ONE_BYTE_MAX,
    THREE_BYTE_MAX,
    THREE_BYTE_PATTERN,
    TWO_BYTE_MAX,
    TWO_BYTE_PATTERN,
    is_surrogate,
)


def codepoint_byte_length(codepoint: int) -> int:
    """Number of bytes needed to encode ``codepoint``.

    Returns 0 for negative values and values above U+10FFFF. Surrogates are
    reported with their nominal length of 3; ``encode_codepoint`` rejects them.
    """
    if codepoint < 0:
        return 0
    if codepoint <= ONE_BYTE_MAX:
        return 1
    if codepoint <= TWO_BYTE_MAX:
        return 2
    if codepoint <= THREE_BYTE_MAX:
        return 3
    if codepoint <= MAX_CODEPOINT:
        return 4
    return 0


def encode_codepoint(codepoint: int, position: Optional[int] = None) -> bytes:
    """Encode a single scalar value.

    Args:
        codepoint: Value to encode; U+0000 is encoded as a single zero byte
        position: Index reported in the error when part of a larger encode

    Raises:
        InvalidArgumentError: If codepoint is not an integer
        InvalidSequenceError: If codepoint is a surrogate or out of range
    """
    if not isinstance(codepoint, int):
        raise InvalidArgumentError(
            f"codepoint must be an int, got {type(codepoint).__name__}"
        )

    if codepoint < 0 or codepoint > MAX_CODEPOINT:
        raise InvalidSequenceError(
            f"codepoint {codepoint:#x} is outside 0..0x10ffff",
            position=position, value=codepoint,
        )
    if is_surrogate(codepoint):
        raise InvalidSequenceError(
            f"codepoint {codepoint:#x} is a surrogate",
            position=position, value=codepoint,
        )

    if codepoint <= ONE_BYTE_MAX:
        return bytes((codepoint,))
    if codepoint <= TWO_BYTE_MAX:
        return bytes((
            TWO_BYTE_PATTERN | (codepoint >> 6),
            CONTINUATION_PATTERN | (codepoint & CONTINUATION_VALUE_MASK),
        ))
    if codepoint <= THREE_BYTE_MAX:
        return bytes((
            THREE_BYTE_PATTERN | (codepoint >> 12),
            CONTINUATION_PATTERN | ((codepoint >> 6) & CONTINUATION_VALUE_MASK),
            CONTINUATION_PATTERN | (codepoint & CONTINUATION_VALUE_MASK),
        ))
    return bytes((
        FOUR_BYTE_PATTERN | (codepoint >> 18),
        CONTINUATION_PATTERN | ((codepoint >> 12) & CONTINUATION_VALUE_MASK),
        CONTINUATION_PATTERN | ((codepoint >> 6) & CONTINUATION_VALUE_MASK),
        CONTINUATION_PATTERN | (codepoint & CONTINUATION_VALUE_MASK),
    ))


def codepoint_to_bytes(codepoint: int, max_size: int) -> bytes:
    """Encode ``codepoint`` into at most ``max_size`` bytes.

    Raises:
        OutOfBoundsError: If the encoding would not fit in max_size bytes
        InvalidSequenceError: If codepoint cannot be encoded
    """
    encoded = encode_codepoint(codepoint)
    if len(encoded) > max_size:
        raise OutOfBoundsError(
            f"encoding of {codepoint:#x} needs {len(encoded)} bytes, "
            f"only {max_size} available",
            offset=len(encoded), limit=max_size,
        )
    return encoded


def encode(codepoints: Iterable[int]) -> bytes:
    """Encode scalar values to UTF-8, stopping at the first 0.

    Nothing is returned for a sequence containing an invalid value; the
    error carries the index of the first offending element.

    Example:
        >>> encode([0x1F600, 0])
        b'\\xf0\\x9f\\x98\\x80'
    """
    if codepoints is None:
        raise InvalidArgumentError("codepoints is required")
    if isinstance(codepoints, (str, bytes, bytearray, memoryview)):
        raise InvalidArgumentError(
            f"codepoints must be an iterable of ints, got {type(codepoints).__name__}"
        )

    output = bytearray()
    for index, codepoint in enumerate(codepoints):
        if isinstance(codepoint, int) and codepoint == NUL_CODEPOINT:
            break
        output += encode_codepoint(codepoint, position=index)
    return bytes(output)
