"""Tests for the benchmarking tool."""

from unittest.mock import patch

import pytest

from utf8_engine.shared import EngineConfig, InvalidSequenceError
from utf8_engine.tools.benchmark import (
    DEFAULT_ITERATIONS,
    ITERATIONS_ENV_VAR,
    BenchmarkResult,
    BenchmarkSuite,
    CodecBenchmark,
    format_report,
    resolve_iterations,
)


def make_result(operation="decode", test_case="mixed", time_ms=10.0, success=True):
    return BenchmarkResult(
        operation=operation,
        test_case=test_case,
        iterations=1000,
        processing_time_ms=time_ms,
        memory_used_mb=0.5,
        bytes_processed=6,
        success=success,
        error_message=None if success else "boom",
    )


class TestResolveIterations:
    """Test iteration count resolution."""

    def test_explicit_value_wins(self):
        assert resolve_iterations(7, {ITERATIONS_ENV_VAR: "99"}) == 7

    def test_environment_value(self):
        assert resolve_iterations(None, {ITERATIONS_ENV_VAR: "250"}) == 250

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-5"])
    def test_bad_environment_value_ignored(self, raw):
        assert resolve_iterations(None, {ITERATIONS_ENV_VAR: raw}) == DEFAULT_ITERATIONS

    def test_default(self):
        assert resolve_iterations(None, {}) == DEFAULT_ITERATIONS

    def test_reads_process_environment(self):
        with patch.dict("os.environ", {ITERATIONS_ENV_VAR: "42"}):
            assert resolve_iterations() == 42

    def test_non_positive_explicit_value(self):
        with pytest.raises(ValueError, match="positive"):
            resolve_iterations(0)


class TestBenchmarkResult:
    """Test derived benchmark metrics."""

    def test_rates(self):
        """Test per-operation and per-second rates."""
        result = make_result(time_ms=10.0)
        assert result.ns_per_op == pytest.approx(10000.0)
        assert result.ops_per_second == pytest.approx(100000.0)
        assert result.bytes_per_second == pytest.approx(600000.0)

    def test_zero_time(self):
        """Test that zero elapsed time yields zero rates."""
        result = make_result(time_ms=0.0)
        assert result.ops_per_second == 0.0
        assert result.bytes_per_second == 0.0


class TestBenchmarkSuite:
    """Test suite aggregation and reporting."""

    def test_filters(self):
        suite = BenchmarkSuite()
        suite.add_result(make_result("decode", "mixed"))
        suite.add_result(make_result("encode", "mixed"))
        suite.add_result(make_result("decode", "ascii"))

        assert len(suite.get_results_by_operation("decode")) == 2
        assert len(suite.get_results_by_test_case("mixed")) == 2

    def test_statistics(self):
        """Test statistics over successful runs only."""
        suite = BenchmarkSuite()
        suite.add_result(make_result(time_ms=10.0))
        suite.add_result(make_result(time_ms=30.0))
        suite.add_result(make_result(time_ms=99.0, success=False))

        stats = suite.get_statistics("decode", "processing_time_ms")
        assert stats["count"] == 2
        assert stats["mean"] == pytest.approx(20.0)
        assert stats["min"] == 10.0
        assert stats["max"] == 30.0

    def test_statistics_unknown(self):
        """Test that unknown operations or metrics give empty statistics."""
        suite = BenchmarkSuite()
        suite.add_result(make_result())
        assert suite.get_statistics("missing", "ns_per_op") == {}
        assert suite.get_statistics("decode", "bogus") == {}

    def test_generate_report(self):
        """Test the report structure."""
        suite = BenchmarkSuite()
        suite.add_result(make_result("decode", "mixed"))
        suite.add_result(make_result("encode", "ascii", success=False))

        report = suite.generate_report()
        assert report["total_results"] == 2
        assert report["operations"] == ["decode", "encode"]
        assert report["summary"]["encode"]["successful_runs"] == 0
        assert report["detailed_results"]["mixed"]["decode"]["success"] is True
        assert report["detailed_results"]["ascii"]["encode"]["error"] == "boom"

    def test_format_report(self):
        """Test the text rendering."""
        suite = BenchmarkSuite()
        suite.add_result(make_result("decode", "mixed"))
        suite.add_result(make_result("encode", "mixed", success=False))

        text = format_report(suite)
        assert "decode[mixed]" in text
        assert "FAILED: boom" in text


class TestCodecBenchmark:
    """Test running the benchmark."""

    def test_run_all_operations(self):
        """Test that every operation runs on every test case."""
        benchmark = CodecBenchmark(iterations=2, correlation_id="bench-1")
        suite = benchmark.run_benchmark()

        operations = {r.operation for r in suite.results}
        assert operations == {
            "decode", "encode", "iterate", "validate", "length", "buffer_append"
        }
        assert len(suite.results) == len(operations) * len(benchmark.test_cases)
        assert all(r.success for r in suite.results)
        assert all(r.iterations == 2 for r in suite.results)

    def test_run_selected_operation(self):
        suite = CodecBenchmark(iterations=1).run_benchmark(["validate"])
        assert {r.operation for r in suite.results} == {"validate"}

    def test_unknown_operation(self):
        with pytest.raises(ValueError, match="Unknown benchmark operations"):
            CodecBenchmark(iterations=1).run_benchmark(["decode", "nope"])

    def test_memory_sampled_with_psutil(self):
        """Test that resident memory is read through psutil."""
        benchmark = CodecBenchmark(iterations=1)
        with patch("utf8_engine.tools.benchmark.psutil.Process") as mock_process:
            mock_process.return_value.memory_info.return_value.rss = 10 * 1024 * 1024
            assert benchmark._measure_memory_usage() == pytest.approx(10.0)

    def test_failed_operation_recorded(self):
        """Test that an engine error is recorded instead of raised."""
        benchmark = CodecBenchmark(iterations=1, warmup_runs=0)
        benchmark.test_cases = {"broken": b"\xff"}
        suite = benchmark.run_benchmark(["decode"])

        result = suite.results[0]
        assert not result.success
        assert "invalid lead byte" in result.error_message

    def test_lenient_config_used(self):
        """Test that the engine configuration reaches the codec."""
        benchmark = CodecBenchmark(iterations=1, warmup_runs=0, config=EngineConfig.lenient())
        benchmark.test_cases = {"broken": b"\xff"}
        assert benchmark.run_benchmark(["decode"]).results[0].success

    def test_warmup_errors_propagate(self):
        """Test that warmup runs are not silently guarded."""
        benchmark = CodecBenchmark(iterations=1, warmup_runs=1)
        benchmark.test_cases = {"broken": b"\xff"}
        with pytest.raises(InvalidSequenceError):
            benchmark.run_benchmark(["decode"])
