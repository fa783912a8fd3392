"""UTF-8 grammar constants and lead-byte classification.

The table here is the single source of truth for which lead bytes start a
sequence, how many continuation bytes follow, and how the first continuation
byte is narrowed to exclude overlong forms, surrogates and values above
U+10FFFF.
"""

from typing import NamedTuple, Optional

# Terminator
NUL_BYTE = 0x00

# 1-byte sequences
ASCII_MAX = 0x7F

# 2-byte sequences (0xC0 and 0xC1 would only produce overlong forms)
TWO_BYTE_LEAD_MIN = 0xC2
TWO_BYTE_LEAD_MAX = 0xDF
TWO_BYTE_PATTERN = 0xC0
TWO_BYTE_VALUE_MASK = 0x1F

# 3-byte sequences
THREE_BYTE_LEAD_MIN = 0xE0
THREE_BYTE_LEAD_MAX = 0xEF
THREE_BYTE_SURROGATE_LEAD = 0xED
THREE_BYTE_PATTERN = 0xE0
THREE_BYTE_VALUE_MASK = 0x0F

# 4-byte sequences
FOUR_BYTE_LEAD_MIN = 0xF0
FOUR_BYTE_LEAD_MAX = 0xF4
FOUR_BYTE_PATTERN = 0xF0
FOUR_BYTE_VALUE_MASK = 0x07

# Continuation bytes: 10xxxxxx
CONTINUATION_MASK = 0xC0
CONTINUATION_PATTERN = 0x80
CONTINUATION_VALUE_MASK = 0x3F
CONTINUATION_MIN = 0x80
CONTINUATION_MAX = 0xBF

# Narrowed bounds for the first continuation byte
E0_CONTINUATION_MIN = 0xA0  # below this the value fits in 2 bytes
ED_CONTINUATION_MAX = 0x9F  # above this the value is a surrogate
F0_CONTINUATION_MIN = 0x90  # below this the value fits in 3 bytes
F4_CONTINUATION_MAX = 0x8F  # above this the value exceeds U+10FFFF

# Scalar value boundaries
ONE_BYTE_MAX = 0x7F
TWO_BYTE_MAX = 0x7FF
THREE_BYTE_MAX = 0xFFFF
MAX_CODEPOINT = 0x10FFFF

SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

NUL_CODEPOINT = 0x0
REPLACEMENT_CHARACTER = 0xFFFD

MAX_SEQUENCE_LENGTH = 4


class LeadByte(NamedTuple):
    """How a multi-byte sequence starting with a given lead byte continues.

    Attributes:
        length: Total sequence length in bytes (2-4)
        seed: Value bits carried by the lead byte
        first_min: Lowest allowed first continuation byte
        first_max: Highest allowed first continuation byte
    """

    length: int
    seed: int
    first_min: int
    first_max: int


def classify_lead_byte(byte: int) -> Optional[LeadByte]:
    """Classify a byte that starts a multi-byte sequence.

    Args:
        byte: Candidate lead byte (must be above ASCII_MAX)

    Returns:
        LeadByte description, or None if the byte cannot start a sequence
    """
    if TWO_BYTE_LEAD_MIN <= byte <= TWO_BYTE_LEAD_MAX:
        return LeadByte(2, byte & TWO_BYTE_VALUE_MASK,
                        CONTINUATION_MIN, CONTINUATION_MAX)

    if THREE_BYTE_LEAD_MIN <= byte <= THREE_BYTE_LEAD_MAX:
        first_min = CONTINUATION_MIN
        first_max = CONTINUATION_MAX
        if byte == THREE_BYTE_LEAD_MIN:
            first_min = E0_CONTINUATION_MIN
        elif byte == THREE_BYTE_SURROGATE_LEAD:
            first_max = ED_CONTINUATION_MAX
        return LeadByte(3, byte & THREE_BYTE_VALUE_MASK, first_min, first_max)

    if FOUR_BYTE_LEAD_MIN <= byte <= FOUR_BYTE_LEAD_MAX:
        first_min = CONTINUATION_MIN
        first_max = CONTINUATION_MAX
        if byte == FOUR_BYTE_LEAD_MIN:
            first_min = F0_CONTINUATION_MIN
        elif byte == FOUR_BYTE_LEAD_MAX:
            first_max = F4_CONTINUATION_MAX
        return LeadByte(4, byte & FOUR_BYTE_VALUE_MASK, first_min, first_max)

    return None


def sequence_length(lead: int) -> int:
    """Return the sequence length announced by a lead byte, 0 if invalid."""
    if lead <= ASCII_MAX:
        return 1
    info = classify_lead_byte(lead)
    return info.length if info else 0


def is_continuation_byte(byte: int) -> bool:
    """Check whether a byte matches the 10xxxxxx pattern."""
    return (byte & CONTINUATION_MASK) == CONTINUATION_PATTERN


def is_surrogate(codepoint: int) -> bool:
    """Check whether a value lies in the UTF-16 surrogate range."""
    return SURROGATE_MIN <= codepoint <= SURROGATE_MAX
