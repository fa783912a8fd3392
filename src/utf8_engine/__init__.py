"""UTF-8 Engine.

Strict UTF-8 decoding and encoding, bidirectional codepoint iteration, an
owned string buffer that stays valid under mutation, and basic text
utilities.

Progressive API Disclosure:
- Level 1: Simple functions - decode(), encode(), is_valid()
- Level 2: Configured codec - Utf8Codec with an EngineConfig
- Level 3: Cursors and buffers - CodepointIterator, Utf8String
"""

__version__ = "0.1.0"
__author__ = "UTF-8 Engine Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured codec
from .codec import Utf8Codec, decode, decode_one, encode, encode_codepoint

# Configuration and error types for advanced usage
from .shared.config import BufferConfig, CodecConfig, EngineConfig, ErrorPolicy
from .shared.errors import (
    InvalidArgumentError,
    InvalidSequenceError,
    OutOfBoundsError,
    OutOfMemoryError,
    Utf8Error,
)
from .shared.result import DecodeResult

# Level 3: Cursors, buffers and utilities
from .text import (
    CodepointIterator,
    Utf8String,
    find_char,
    find_substring,
    is_valid,
    length_in_codepoints,
    to_lower,
    to_upper,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions (progressive disclosure entry point)
    "decode",
    "encode",
    "decode_one",
    "encode_codepoint",
    "is_valid",
    "length_in_codepoints",
    "find_char",
    "find_substring",
    "to_upper",
    "to_lower",

    # Level 2: Configured codec
    "Utf8Codec",

    # Level 3: Cursors and buffers
    "CodepointIterator",
    "Utf8String",

    # Result objects, configuration and errors
    "DecodeResult",
    "BufferConfig",
    "CodecConfig",
    "EngineConfig",
    "ErrorPolicy",
    "Utf8Error",
    "InvalidArgumentError",
    "InvalidSequenceError",
    "OutOfBoundsError",
    "OutOfMemoryError",
]
