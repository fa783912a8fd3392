"""Result objects and diagnostic types for decode operations.

These carry what a replace-on-error decode did to its input, so callers that
accept U+FFFD substitution can still see where and why it happened.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Input was repaired (replacement emitted)
    ERROR = auto()      # Input was rejected


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class DecodeResult:
    """Outcome of a bulk decode with per-error diagnostics.

    Attributes:
        codepoints: Decoded scalar values (no terminator)
        bytes_consumed: Bytes read before the terminator or end of input
        replacements: Number of U+FFFD substitutions made
        diagnostics: One entry per decode error encountered
    """

    codepoints: List[int]
    bytes_consumed: int = 0
    replacements: int = 0
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when the input decoded without any substitution."""
        return self.replacements == 0

    @property
    def replacement_rate(self) -> float:
        """Fraction of emitted codepoints that are substitutions."""
        if not self.codepoints:
            return 0.0
        return self.replacements / len(self.codepoints)

    def add_diagnostic(self, entry: DiagnosticEntry) -> None:
        """Append a diagnostic entry."""
        self.diagnostics.append(entry)
