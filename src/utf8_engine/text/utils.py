"""Validation, search, case mapping and classification helpers.

Byte inputs without an explicit ``length`` end at their first NUL byte.
Case mapping and classification cover basic Latin only.
"""

from typing import Callable, Optional

from utf8_engine.codec.encoder import encode_codepoint
from utf8_engine.codec.grammar import ASCII_MAX
from utf8_engine.codec.inputs import ByteInput, ensure_bytes, resolve_length
from utf8_engine.shared.errors import InvalidSequenceError

from .iterator import CodepointIterator

_UPPER_A = ord("A")
_UPPER_Z = ord("Z")
_LOWER_A = ord("a")
_LOWER_Z = ord("z")
_DIGIT_0 = ord("0")
_DIGIT_9 = ord("9")
_CASE_OFFSET = _LOWER_A - _UPPER_A

WHITESPACE_CODEPOINTS = frozenset(ord(c) for c in " \t\n\r\f\v")


def is_valid(data: ByteInput, length: Optional[int] = None) -> bool:
    """Check that ``data`` is well-formed UTF-8 from start to end."""
    iterator = CodepointIterator(data, length)
    try:
        while iterator.next():
            pass
    except InvalidSequenceError:
        return False
    return True


def length_in_codepoints(data: ByteInput, length: Optional[int] = None) -> int:
    """Count the codepoints in ``data``.

    Raises:
        InvalidSequenceError: If data contains a malformed sequence
    """
    iterator = CodepointIterator(data, length)
    count = 0
    while iterator.next():
        count += 1
    return count


def find_char(
    data: ByteInput, codepoint: int, length: Optional[int] = None
) -> Optional[int]:
    """Byte offset of the first sequence decoding to ``codepoint``, or None.

    Raises:
        InvalidSequenceError: If a malformed sequence precedes any match
    """
    iterator = CodepointIterator(data, length)
    offset = iterator.current_offset()
    while iterator.next():
        if iterator.current_codepoint() == codepoint:
            return offset
        offset = iterator.current_offset()
    return None


def find_substring(
    haystack: ByteInput, needle: ByteInput, length: Optional[int] = None
) -> Optional[int]:
    """Byte offset of the first occurrence of ``needle`` in ``haystack``.

    This is a raw byte search; neither operand is validated. The needle always
    ends at its first NUL. An empty needle matches at offset 0.
    """
    hay = ensure_bytes(haystack, "haystack")
    pattern = ensure_bytes(needle, "needle")
    hay_end = resolve_length(hay, length)
    pattern_end = resolve_length(pattern, None)

    if pattern_end == 0:
        return 0
    index = hay.find(pattern[:pattern_end], 0, hay_end)
    return None if index < 0 else index


def to_upper_codepoint(codepoint: int) -> int:
    """Map a basic Latin lowercase letter to uppercase."""
    if _LOWER_A <= codepoint <= _LOWER_Z:
        return codepoint - _CASE_OFFSET
    return codepoint


def to_lower_codepoint(codepoint: int) -> int:
    """Map a basic Latin uppercase letter to lowercase."""
    if _UPPER_A <= codepoint <= _UPPER_Z:
        return codepoint + _CASE_OFFSET
    return codepoint


def _transform_case(
    data: ByteInput, length: Optional[int], mapping: Callable[[int], int]
) -> bytes:
    output = bytearray()
    for codepoint in CodepointIterator(data, length):
        output += encode_codepoint(mapping(codepoint))
    return bytes(output)


def to_upper(data: ByteInput, length: Optional[int] = None) -> bytes:
    """Return a copy of ``data`` with basic Latin letters uppercased.

    Raises:
        InvalidSequenceError: If data is not well-formed UTF-8
    """
    return _transform_case(data, length, to_upper_codepoint)


def to_lower(data: ByteInput, length: Optional[int] = None) -> bytes:
    """Return a copy of ``data`` with basic Latin letters lowercased.

    Raises:
        InvalidSequenceError: If data is not well-formed UTF-8
    """
    return _transform_case(data, length, to_lower_codepoint)


def is_ascii(codepoint: int) -> bool:
    return 0 <= codepoint <= ASCII_MAX


def is_alpha(codepoint: int) -> bool:
    return is_upper(codepoint) or is_lower(codepoint)


def is_digit(codepoint: int) -> bool:
    return _DIGIT_0 <= codepoint <= _DIGIT_9


def is_space(codepoint: int) -> bool:
    return codepoint in WHITESPACE_CODEPOINTS


def is_upper(codepoint: int) -> bool:
    return _UPPER_A <= codepoint <= _UPPER_Z


def is_lower(codepoint: int) -> bool:
    return _LOWER_A <= codepoint <= _LOWER_Z
