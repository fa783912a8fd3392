"""Text layer: codepoint iteration, owned string buffers and utilities."""

from .buffer import Utf8String
from .iterator import CodepointIterator
from .utils import (
    find_char,
    find_substring,
    is_alpha,
    is_ascii,
    is_digit,
    is_lower,
    is_space,
    is_upper,
    is_valid,
    length_in_codepoints,
    to_lower,
    to_lower_codepoint,
    to_upper,
    to_upper_codepoint,
)

__all__ = [
    "Utf8String",
    "CodepointIterator",
    "find_char",
    "find_substring",
    "is_alpha",
    "is_ascii",
    "is_digit",
    "is_lower",
    "is_space",
    "is_upper",
    "is_valid",
    "length_in_codepoints",
    "to_lower",
    "to_lower_codepoint",
    "to_upper",
    "to_upper_codepoint",
]
