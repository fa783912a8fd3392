"""Normalization of caller-supplied byte inputs."""

from typing import Optional, Union

from utf8_engine.shared.errors import InvalidArgumentError, OutOfBoundsError

from .grammar import NUL_BYTE

ByteInput = Union[bytes, bytearray, memoryview]


def ensure_bytes(data: ByteInput, argument: str = "data") -> Union[bytes, bytearray]:
    """Return an indexable byte sequence for ``data``.

    ``bytes`` and ``bytearray`` are returned as-is so repeated calls on the
    same object do not copy it; a ``memoryview`` is copied once.

    Raises:
        InvalidArgumentError: If data is None, text, or not byte-like
    """
    if isinstance(data, (bytes, bytearray)):
        return data
    if isinstance(data, memoryview):
        return data.tobytes()
    if data is None:
        raise InvalidArgumentError(f"{argument} is required")
    if isinstance(data, str):
        raise InvalidArgumentError(
            f"{argument} must be bytes, not str; encode it first"
        )
    raise InvalidArgumentError(
        f"{argument} must be bytes-like, got {type(data).__name__}"
    )


def cstring_length(data: Union[bytes, bytearray]) -> int:
    """Length of ``data`` up to (not including) the first NUL byte."""
    index = data.find(NUL_BYTE)
    return len(data) if index < 0 else index


def resolve_length(data: Union[bytes, bytearray], length: Optional[int]) -> int:
    """Resolve an optional explicit length against ``data``.

    Without a length the input is NUL-terminated; with one, exactly that many
    bytes are used and NUL is ordinary data.

    Raises:
        OutOfBoundsError: If length is negative or longer than data
    """
    if length is None:
        return cstring_length(data)
    if not 0 <= length <= len(data):
        raise OutOfBoundsError(
            f"length {length} outside 0..{len(data)}", offset=length, limit=len(data)
        )
    return length
