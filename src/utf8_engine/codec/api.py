"""High-level codec API bound to an engine configuration.

``Utf8Codec`` applies the configured error policy by default and can record
one diagnostic per malformed sequence when decoding leniently.
"""

from typing import Iterable, List, Optional

from utf8_engine.shared import (
    DecodeResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    EngineConfig,
    ErrorPolicy,
    get_logger,
)

from .decoder import DecodeStep, run_decoder
from .encoder import encode
from .inputs import ByteInput


class Utf8Codec:
    """Bulk UTF-8 codec with configurable error handling.

    Example:
        >>> codec = Utf8Codec(EngineConfig.lenient())
        >>> codec.decode(b"A\\xffB")
        [65, 65533, 66]
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.correlation_id = correlation_id or self.config.global_.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "codec")

    @property
    def error_policy(self) -> ErrorPolicy:
        """Policy used when no explicit one is passed."""
        return self.config.codec.error_policy

    def decode(
        self, data: ByteInput, on_error: Optional[ErrorPolicy] = None
    ) -> List[int]:
        """Decode NUL-terminated UTF-8 into scalar values."""
        policy = on_error or self.error_policy
        return run_decoder(data, policy).codepoints

    def encode(self, codepoints: Iterable[int]) -> bytes:
        """Encode scalar values, stopping at the first 0."""
        return encode(codepoints)

    def decode_with_diagnostics(self, data: ByteInput) -> DecodeResult:
        """Decode with U+FFFD replacement, recording each substitution.

        Always uses REPLACE so every malformed sequence can be reported. When
        ``record_diagnostics`` is disabled only the counters are filled in.
        """
        entries: List[DiagnosticEntry] = []

        def record(step: DecodeStep) -> None:
            if not self.config.codec.record_diagnostics:
                return
            entries.append(DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=f"{step.reason} replaced with U+FFFD",
                component="codec",
                position=step.position,
                details={"byte": step.value, "consumed": step.consumed},
                correlation_id=self.correlation_id,
            ))

        result = run_decoder(data, ErrorPolicy.REPLACE, on_replace=record)
        for entry in entries:
            result.add_diagnostic(entry)

        if result.replacements:
            self.logger.info(
                f"Decoded {len(result.codepoints)} codepoints with "
                f"{result.replacements} replacement(s)",
                extra={"bytes_consumed": result.bytes_consumed},
            )
        return result
