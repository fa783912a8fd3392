"""Bulk UTF-8 decoding as an explicit state machine.

Each call to ``DecodeState.step`` consumes at most one byte and returns a
``DecodeStep`` describing what happened. ``decode`` drives the machine over a
NUL-terminated input and applies the chosen error policy.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Union

from utf8_engine.shared.config import ErrorPolicy
from utf8_engine.shared.errors import InvalidArgumentError, InvalidSequenceError
from utf8_engine.shared.logging import get_logger
from utf8_engine.shared.result import DecodeResult

from .grammar import (
    ASCII_MAX,
    CONTINUATION_MAX,
    CONTINUATION_MIN,
    CONTINUATION_VALUE_MASK,
    NUL_BYTE,
    REPLACEMENT_CHARACTER,
    classify_lead_byte,
)
from .inputs import ByteInput, ensure_bytes

logger = get_logger(__name__, component="decoder")

# Error reasons reported on ERROR steps
REASON_INVALID_LEAD = "invalid lead byte"
REASON_INVALID_CONTINUATION = "invalid continuation byte"
REASON_TRUNCATED = "truncated sequence"


class DecodeStatus(Enum):
    """Outcome of a single decoder transition."""

    OK = auto()        # A complete codepoint was produced
    CONTINUE = auto()  # Byte accepted, sequence still incomplete
    ERROR = auto()     # Malformed input at ``position``
    FINISH = auto()    # Clean terminator at a sequence boundary


@dataclass(frozen=True)
class DecodeStep:
    """Tagged result of one ``DecodeState.step`` call.

    Attributes:
        status: Which variant this step is
        codepoint: Decoded value (OK only)
        position: Byte offset of the produced sequence start (OK), the
            offending byte (ERROR) or the terminator (FINISH)
        value: Offending byte for ERROR steps, None for a premature end
        consumed: Whether the byte at ``position`` was consumed
        reason: Short description for ERROR steps
    """

    status: DecodeStatus
    codepoint: int = 0
    position: int = 0
    value: Optional[int] = None
    consumed: bool = True
    reason: str = ""


@dataclass
class DecodeState:
    """Mutable state of one bulk decode over ``data``."""

    data: Union[bytes, bytearray]
    offset: int = 0
    codepoint: int = 0
    seen: int = 0
    needed: int = 0
    lower: int = CONTINUATION_MIN
    upper: int = CONTINUATION_MAX
    sequence_start: int = 0

    def _reset_sequence(self) -> None:
        self.codepoint = 0
        self.seen = 0
        self.needed = 0
        self.lower = CONTINUATION_MIN
        self.upper = CONTINUATION_MAX

    def step(self) -> DecodeStep:
        """Advance the machine by one byte."""
        position = self.offset
        byte = self.data[position] if position < len(self.data) else NUL_BYTE

        if byte == NUL_BYTE:
            if self.needed:
                self._reset_sequence()
                return DecodeStep(
                    DecodeStatus.ERROR, position=position, consumed=False,
                    reason=REASON_TRUNCATED,
                )
            return DecodeStep(DecodeStatus.FINISH, position=position, consumed=False)

        if self.needed == 0:
            self.offset += 1
            if byte <= ASCII_MAX:
                return DecodeStep(DecodeStatus.OK, codepoint=byte, position=position)

            lead = classify_lead_byte(byte)
            if lead is None:
                return DecodeStep(
                    DecodeStatus.ERROR, position=position, value=byte,
                    reason=REASON_INVALID_LEAD,
                )

            self.sequence_start = position
            self.codepoint = lead.seed
            self.needed = lead.length - 1
            self.lower = lead.first_min
            self.upper = lead.first_max
            return DecodeStep(DecodeStatus.CONTINUE, position=position)

        if not self.lower <= byte <= self.upper:
            # Left in place to be re-read as a lead byte
            self._reset_sequence()
            return DecodeStep(
                DecodeStatus.ERROR, position=position, value=byte, consumed=False,
                reason=REASON_INVALID_CONTINUATION,
            )

        self.offset += 1
        self.lower = CONTINUATION_MIN
        self.upper = CONTINUATION_MAX
        self.codepoint = (self.codepoint << 6) | (byte & CONTINUATION_VALUE_MASK)
        self.seen += 1

        if self.seen < self.needed:
            return DecodeStep(DecodeStatus.CONTINUE, position=position)

        codepoint = self.codepoint
        self._reset_sequence()
        return DecodeStep(
            DecodeStatus.OK, codepoint=codepoint, position=self.sequence_start
        )


def run_decoder(
    data: ByteInput,
    on_error: ErrorPolicy = ErrorPolicy.REJECT,
    on_replace: Optional[Callable[[DecodeStep], None]] = None,
) -> DecodeResult:
    """Drive a ``DecodeState`` over ``data`` until the terminator.

    Args:
        data: NUL-terminated UTF-8 input (end of data also terminates)
        on_error: Policy applied to each malformed sequence
        on_replace: Called with each ERROR step that was replaced

    Returns:
        DecodeResult with codepoints, bytes consumed and replacement count

    Raises:
        InvalidArgumentError: If data is not bytes-like or on_error is not a policy
        InvalidSequenceError: On the first malformed sequence under REJECT
    """
    view = ensure_bytes(data)
    if not isinstance(on_error, ErrorPolicy):
        raise InvalidArgumentError(f"on_error must be an ErrorPolicy, got {on_error!r}")

    state = DecodeState(view)
    codepoints: List[int] = []
    replacements = 0

    while True:
        step = state.step()
        status = step.status

        if status is DecodeStatus.OK:
            codepoints.append(step.codepoint)
        elif status is DecodeStatus.CONTINUE:
            continue
        elif status is DecodeStatus.FINISH:
            break
        else:
            if logger.is_enabled_for(logging.DEBUG):
                logger.debug(
                    f"Decode error at byte {step.position}: {step.reason}",
                    extra={"position": step.position, "byte": step.value},
                )
            if on_error is ErrorPolicy.REJECT:
                raise InvalidSequenceError(
                    f"{step.reason} at byte {step.position}",
                    position=step.position,
                    value=step.value,
                )
            codepoints.append(REPLACEMENT_CHARACTER)
            replacements += 1
            if on_replace is not None:
                on_replace(step)

    if replacements:
        logger.debug(f"Replaced {replacements} malformed sequence(s) with U+FFFD")

    return DecodeResult(
        codepoints=codepoints,
        bytes_consumed=state.offset,
        replacements=replacements,
    )


def decode(data: ByteInput, on_error: ErrorPolicy = ErrorPolicy.REJECT) -> List[int]:
    """Decode NUL-terminated UTF-8 bytes into a list of scalar values.

    An embedded NUL byte ends the input. The terminator itself is not part of
    the returned list.

    Example:
        >>> decode(b"A\\xf0\\x9f\\x98\\x80B")
        [65, 128512, 66]
    """
    return run_decoder(data, on_error).codepoints
