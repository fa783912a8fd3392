"""UTF-8 codec layer.

Bulk decode and encode, single-sequence decoding and the grammar tables they
share.
"""

from .api import Utf8Codec
from .decoder import DecodeState, DecodeStatus, DecodeStep, decode, run_decoder
from .encoder import codepoint_byte_length, codepoint_to_bytes, encode, encode_codepoint
from .grammar import MAX_CODEPOINT, REPLACEMENT_CHARACTER, sequence_length
from .single import decode_one

__all__ = [
    "Utf8Codec",
    "DecodeState",
    "DecodeStatus",
    "DecodeStep",
    "decode",
    "run_decoder",
    "codepoint_byte_length",
    "codepoint_to_bytes",
    "encode",
    "encode_codepoint",
    "MAX_CODEPOINT",
    "REPLACEMENT_CHARACTER",
    "sequence_length",
    "decode_one",
]
