"""Tests for single-sequence decoding and the grammar table."""

import pytest

from utf8_engine.codec import decode_one, sequence_length
from utf8_engine.codec.grammar import (
    classify_lead_byte,
    is_continuation_byte,
    is_surrogate,
)
from utf8_engine.shared import InvalidArgumentError, InvalidSequenceError, OutOfBoundsError


class TestDecodeOne:
    """Test decoding exactly one sequence inside a window."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            (b"A", (0x41, 1)),
            (b"\xc3\xa9", (0xE9, 2)),
            (b"\xe2\x82\xac", (0x20AC, 3)),
            (b"\xf0\x9f\x98\x80", (0x1F600, 4)),
        ],
    )
    def test_each_width(self, data, expected):
        """Test decoding sequences of every length."""
        assert decode_one(data) == expected

    def test_start_offset(self):
        """Test decoding from the middle of the data."""
        assert decode_one(b"A\xf0\x9f\x98\x80B", 1) == (0x1F600, 4)
        assert decode_one(b"A\xf0\x9f\x98\x80B", 5) == (0x42, 1)

    def test_nul_is_data_inside_window(self):
        """Test that NUL is an ordinary byte for the bounded decoder."""
        assert decode_one(b"\x00") == (0, 1)

    def test_never_reads_past_end(self):
        """Test that a sequence crossing the window end is truncated."""
        with pytest.raises(InvalidSequenceError, match="truncated"):
            decode_one(b"\xf0\x9f\x98\x80", 0, 3)

    def test_continuation_as_lead(self):
        """Test that a continuation byte cannot start a sequence."""
        with pytest.raises(InvalidSequenceError, match="invalid lead byte") as exc_info:
            decode_one(b"\x80")
        assert exc_info.value.position == 0

    def test_bad_continuation_pattern(self):
        """Test that a non-10xxxxxx byte inside a sequence is rejected."""
        with pytest.raises(InvalidSequenceError, match="continuation") as exc_info:
            decode_one(b"\xe2\x41\xac")
        assert exc_info.value.position == 1

    @pytest.mark.parametrize(
        "data",
        [b"\xc0\x80", b"\xc1\xbf", b"\xe0\x9f\xbf", b"\xf0\x8f\xbf\xbf"],
    )
    def test_overlong_rejected(self, data):
        """Test that overlong encodings are rejected."""
        with pytest.raises(InvalidSequenceError):
            decode_one(data)

    def test_surrogate_rejected(self):
        """Test that encoded surrogates are rejected."""
        with pytest.raises(InvalidSequenceError, match="surrogate"):
            decode_one(b"\xed\xa0\x80")

    def test_above_max_rejected(self):
        """Test that values above U+10FFFF are rejected."""
        with pytest.raises(InvalidSequenceError):
            decode_one(b"\xf4\x90\x80\x80")

    def test_empty_window(self):
        """Test that an empty window is out of bounds."""
        with pytest.raises(OutOfBoundsError):
            decode_one(b"")
        with pytest.raises(OutOfBoundsError):
            decode_one(b"AB", 1, 1)

    def test_window_outside_data(self):
        """Test that a window end past the data is out of bounds."""
        with pytest.raises(OutOfBoundsError, match="window end"):
            decode_one(b"AB", 0, 3)
        with pytest.raises(OutOfBoundsError):
            decode_one(b"AB", -1)

    def test_text_rejected(self):
        """Test that text input is refused."""
        with pytest.raises(InvalidArgumentError):
            decode_one("A")


class TestGrammar:
    """Test lead byte classification."""

    @pytest.mark.parametrize(
        "lead,length",
        [(0x00, 1), (0x7F, 1), (0x80, 0), (0xBF, 0), (0xC0, 0), (0xC1, 0),
         (0xC2, 2), (0xDF, 2), (0xE0, 3), (0xEF, 3), (0xF0, 4), (0xF4, 4),
         (0xF5, 0), (0xFF, 0)],
    )
    def test_sequence_length(self, lead, length):
        """Test the length announced by every lead byte class."""
        assert sequence_length(lead) == length

    def test_narrowed_bounds(self):
        """Test the first continuation bounds after special lead bytes."""
        assert classify_lead_byte(0xE0).first_min == 0xA0
        assert classify_lead_byte(0xED).first_max == 0x9F
        assert classify_lead_byte(0xF0).first_min == 0x90
        assert classify_lead_byte(0xF4).first_max == 0x8F
        assert classify_lead_byte(0xE1)[2:] == (0x80, 0xBF)

    def test_seed_bits(self):
        """Test that the lead byte payload bits are extracted."""
        assert classify_lead_byte(0xDF).seed == 0x1F
        assert classify_lead_byte(0xEF).seed == 0x0F
        assert classify_lead_byte(0xF4).seed == 0x04

    def test_byte_predicates(self):
        """Test continuation and surrogate predicates."""
        assert is_continuation_byte(0x80)
        assert is_continuation_byte(0xBF)
        assert not is_continuation_byte(0xC0)
        assert not is_continuation_byte(0x41)
        assert is_surrogate(0xD800) and is_surrogate(0xDFFF)
        assert not is_surrogate(0xE000)
