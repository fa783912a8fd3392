"""Tests for result objects, diagnostics and logging helpers."""

import logging

import pytest

from utf8_engine.shared.logging import EngineLogger, configure_logging, get_logger
from utf8_engine.shared.result import DecodeResult, DiagnosticEntry, DiagnosticSeverity


class TestDiagnosticEntry:
    """Test diagnostic entry validation."""

    def test_valid_entry(self):
        """Test a fully populated entry."""
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message="invalid lead byte replaced",
            component="codec",
            position=4,
            details={"byte": 0xFF},
        )
        assert entry.position == 4
        assert entry.timestamp > 0
        assert entry.correlation_id is None

    def test_empty_message_rejected(self):
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.ERROR, "", "codec")

    def test_empty_component_rejected(self):
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.ERROR, "msg", "")


class TestDecodeResult:
    """Test decode result properties."""

    def test_clean_result(self):
        result = DecodeResult(codepoints=[0x41, 0x42], bytes_consumed=2)
        assert result.success
        assert result.replacement_rate == 0.0
        assert result.diagnostics == []

    def test_replacement_rate(self):
        result = DecodeResult(codepoints=[0x41, 0xFFFD, 0xFFFD, 0x42], replacements=2)
        assert not result.success
        assert result.replacement_rate == 0.5

    def test_empty_result_rate(self):
        assert DecodeResult(codepoints=[]).replacement_rate == 0.0

    def test_add_diagnostic(self):
        result = DecodeResult(codepoints=[])
        entry = DiagnosticEntry(DiagnosticSeverity.INFO, "note", "codec")
        result.add_diagnostic(entry)
        assert result.diagnostics == [entry]


class TestLogging:
    """Test the correlation-aware logger."""

    def test_get_logger(self):
        """Test that get_logger wraps a standard logger."""
        logger = get_logger("utf8_engine.codec.api", "req-7", "codec")
        assert isinstance(logger, EngineLogger)
        assert logger.logger is logging.getLogger("utf8_engine.codec.api")
        assert logger.correlation_id == "req-7"
        assert logger.component == "codec"

    def test_component_defaults_to_module(self):
        """Test the default component name."""
        assert get_logger("utf8_engine.text.buffer").component == "buffer"

    def test_records_carry_context(self, caplog):
        """Test that component and correlation ID reach log records."""
        logger = get_logger("utf8_engine.test", "req-9", "tests")
        with caplog.at_level(logging.DEBUG, logger="utf8_engine.test"):
            logger.debug("hello", extra={"position": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "tests"
        assert record.correlation_id == "req-9"
        assert record.position == 3

    def test_configure_logging_is_idempotent(self):
        """Test that repeated configuration does not stack handlers."""
        package_logger = logging.getLogger("utf8_engine")
        configure_logging("INFO")
        configure_logging("DEBUG")

        handlers = [
            h for h in package_logger.handlers
            if getattr(h, "_utf8_engine_handler", False)
        ]
        assert len(handlers) == 1
        assert handlers[0].level == logging.DEBUG
        assert package_logger.level == logging.DEBUG

        configure_logging("WARNING")
