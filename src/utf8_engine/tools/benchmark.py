"""Performance benchmarking for the codec, iterator, utilities and buffer.

Each operation is timed over a fixed number of iterations per test case and
resident memory is sampled with psutil before and after the timed loop.
"""

import gc
import os
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import psutil

from utf8_engine.codec import Utf8Codec
from utf8_engine.shared import EngineConfig, Utf8Error, get_logger
from utf8_engine.text import CodepointIterator, Utf8String, is_valid, length_in_codepoints

ITERATIONS_ENV_VAR = "UTF8_ENGINE_BENCH_ITERS"
DEFAULT_ITERATIONS = 10000

METRICS = ["processing_time_ms", "memory_used_mb", "ns_per_op", "ops_per_second"]


def resolve_iterations(
    requested: Optional[int] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Pick the iteration count: explicit value, then environment, then default.

    Non-numeric or non-positive environment values are ignored.
    """
    if requested is not None:
        if requested <= 0:
            raise ValueError(f"iterations must be positive, got {requested}")
        return requested

    env = os.environ if environ is None else environ
    raw = env.get(ITERATIONS_ENV_VAR)
    if raw:
        try:
            value = int(raw)
        except ValueError:
            return DEFAULT_ITERATIONS
        if value > 0:
            return value
    return DEFAULT_ITERATIONS


@dataclass
class BenchmarkResult:
    """Result of timing one operation on one test case."""

    operation: str
    test_case: str
    iterations: int
    processing_time_ms: float
    memory_used_mb: float
    bytes_processed: int
    success: bool
    error_message: Optional[str] = None

    @property
    def ns_per_op(self) -> float:
        """Average nanoseconds per iteration."""
        if self.iterations <= 0:
            return 0.0
        return (self.processing_time_ms * 1e6) / self.iterations

    @property
    def ops_per_second(self) -> float:
        """Iterations completed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.iterations * 1000.0) / self.processing_time_ms

    @property
    def bytes_per_second(self) -> float:
        """Input bytes processed per second across all iterations."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_processed * self.iterations * 1000.0) / self.processing_time_ms


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "UTF-8 Engine Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        self.results.append(result)

    def get_results_by_operation(self, operation: str) -> List[BenchmarkResult]:
        return [r for r in self.results if r.operation == operation]

    def get_results_by_test_case(self, test_case: str) -> List[BenchmarkResult]:
        return [r for r in self.results if r.test_case == test_case]

    def get_statistics(self, operation: str, metric: str) -> Dict[str, float]:
        """Statistical summary of one metric over an operation's successful runs."""
        if metric not in METRICS:
            return {}
        values = [
            getattr(result, metric)
            for result in self.get_results_by_operation(operation)
            if result.success
        ]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Build a JSON-serializable report of the suite."""
        operations = sorted(set(r.operation for r in self.results))
        test_cases = sorted(set(r.test_case for r in self.results))

        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "operations": operations,
            "test_cases": test_cases,
            "summary": {},
            "detailed_results": {},
        }

        for operation in operations:
            op_results = self.get_results_by_operation(operation)
            successful = [r for r in op_results if r.success]
            report["summary"][operation] = {
                "total_runs": len(op_results),
                "successful_runs": len(successful),
                "timing": self.get_statistics(operation, "ns_per_op"),
                "memory": self.get_statistics(operation, "memory_used_mb"),
            }

        for test_case in test_cases:
            report["detailed_results"][test_case] = {
                result.operation: {
                    "iterations": result.iterations,
                    "processing_time_ms": result.processing_time_ms,
                    "ns_per_op": result.ns_per_op,
                    "ops_per_second": result.ops_per_second,
                    "memory_used_mb": result.memory_used_mb,
                    "success": result.success,
                    "error": result.error_message,
                }
                for result in self.get_results_by_test_case(test_case)
            }

        return report


def format_report(suite: BenchmarkSuite) -> str:
    """Render a suite as aligned text, one line per operation and test case."""
    lines = [f"{suite.suite_name}", "-" * 60]
    for result in suite.results:
        label = f"{result.operation}[{result.test_case}]"
        if not result.success:
            lines.append(f"{label:<28} FAILED: {result.error_message}")
            continue
        lines.append(
            f"{label:<28} {result.processing_time_ms:10.3f} ms total, "
            f"{result.ns_per_op:9.1f} ns/op, {result.ops_per_second / 1e6:7.3f} Mops/s"
        )
    return "\n".join(lines)


class CodecBenchmark:
    """Times every public engine operation over a set of inputs."""

    def __init__(
        self,
        iterations: Optional[int] = None,
        correlation_id: Optional[str] = None,
        config: Optional[EngineConfig] = None,
        warmup_runs: int = 1,
    ) -> None:
        """Initialize benchmark.

        Args:
            iterations: Timed iterations per operation; see ``resolve_iterations``
            correlation_id: Optional correlation ID for tracking
            config: Engine configuration used for the codec and buffers
            warmup_runs: Untimed iterations before each measurement
        """
        self.iterations = resolve_iterations(iterations)
        self.correlation_id = correlation_id
        self.config = config or EngineConfig()
        self.warmup_runs = warmup_runs
        self.logger = get_logger(__name__, correlation_id, "benchmark")
        self.codec = Utf8Codec(self.config, correlation_id)

        self.test_cases = self._create_test_cases()

    def _create_test_cases(self) -> Dict[str, bytes]:
        return {
            "mixed": b"A\xf0\x9f\x98\x80B",
            "ascii": b"The quick brown fox jumps over the lazy dog",
            "multilingual": (
                "Grüße, Καλημέρα, こんにちは, Привет, 😀🚀".encode("utf-8")
            ),
        }

    def _operations(self) -> Dict[str, Callable[[bytes], Any]]:
        codec = self.codec
        buffer_config = self.config.buffer

        def iterate(data: bytes) -> int:
            total = 0
            for codepoint in CodepointIterator(data):
                total += codepoint
            return total

        def buffer_append(data: bytes) -> int:
            buffer = Utf8String(b"", buffer_config)
            buffer.append_bytes(data)
            buffer.append_bytes(data)
            return buffer.codepoint_len

        return {
            "decode": codec.decode,
            "encode": lambda data: codec.encode(codec.decode(data)),
            "iterate": iterate,
            "validate": is_valid,
            "length": length_in_codepoints,
            "buffer_append": buffer_append,
        }

    def _measure_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _time_operation(
        self,
        operation: str,
        func: Callable[[bytes], Any],
        test_case: str,
        data: bytes,
    ) -> BenchmarkResult:
        for _ in range(self.warmup_runs):
            func(data)

        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.perf_counter()

        try:
            for _ in range(self.iterations):
                func(data)
            success = True
            error_message = None
        except Utf8Error as e:
            success = False
            error_message = str(e)

        processing_time = (time.perf_counter() - start_time) * 1000
        memory_after = self._measure_memory_usage()

        return BenchmarkResult(
            operation=operation,
            test_case=test_case,
            iterations=self.iterations,
            processing_time_ms=processing_time,
            memory_used_mb=max(0.0, memory_after - memory_before),
            bytes_processed=len(data),
            success=success,
            error_message=error_message,
        )

    def run_benchmark(self, operations: Optional[List[str]] = None) -> BenchmarkSuite:
        """Run the selected operations (all by default) over every test case."""
        available = self._operations()
        selected = operations or list(available)
        unknown = [name for name in selected if name not in available]
        if unknown:
            raise ValueError(f"Unknown benchmark operations: {unknown}")

        suite = BenchmarkSuite()
        self.logger.info(
            "Starting benchmark suite",
            extra={
                "iterations": self.iterations,
                "operations": selected,
                "test_cases": len(self.test_cases),
            },
        )

        for test_case, data in self.test_cases.items():
            for operation in selected:
                self.logger.debug(f"Benchmarking {operation} on {test_case}")
                result = self._time_operation(
                    operation, available[operation], test_case, data
                )
                if not result.success:
                    self.logger.warning(
                        f"Benchmark {operation}[{test_case}] failed",
                        extra={"error": result.error_message},
                    )
                suite.add_result(result)

        self.logger.info(
            "Benchmark suite completed",
            extra={"total_results": len(suite.results)},
        )
        return suite
