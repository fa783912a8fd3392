"""Exception hierarchy for the UTF-8 engine.

Every fallible operation in the codec, iterator, string buffer and utility
layers raises one of the exceptions below. Each one also derives from the
closest built-in exception so callers can catch ``ValueError``,
``IndexError`` or ``MemoryError`` without importing this module.
"""

from typing import Optional


class Utf8Error(Exception):
    """Base exception for all UTF-8 engine errors."""


class InvalidArgumentError(Utf8Error, ValueError):
    """Raised when a required input is missing, mistyped or unusable."""


class InvalidSequenceError(Utf8Error, ValueError):
    """Raised for malformed UTF-8 input or an unencodable scalar value.

    Attributes:
        position: Byte offset (decode) or sequence index (encode) of the failure
        value: Offending byte or scalar value, when known
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        value: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.value = value


class OutOfMemoryError(Utf8Error, MemoryError):
    """Raised when storage cannot be allocated or a capacity limit is hit."""

    def __init__(self, message: str, requested: Optional[int] = None) -> None:
        super().__init__(message)
        self.requested = requested


class OutOfBoundsError(Utf8Error, IndexError):
    """Raised when an offset or index falls outside the valid range.

    Attributes:
        offset: The offset that was requested
        limit: The exclusive upper bound that applied
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.limit = limit
