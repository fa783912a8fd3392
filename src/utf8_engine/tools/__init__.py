"""Developer tools for the UTF-8 engine.

This module provides performance benchmarking of the codec, iterator,
utilities and string buffer.
"""

from .benchmark import BenchmarkResult, BenchmarkSuite, CodecBenchmark, format_report

__all__ = [
    "BenchmarkResult",
    "BenchmarkSuite",
    "CodecBenchmark",
    "format_report",
]
