"""Developer tools for utf8stream."""

from .benchmarks import BenchmarkResult, BenchmarkSuite, TranscodingBenchmark

__all__ = [
    "BenchmarkResult",
    "BenchmarkSuite",
    "TranscodingBenchmark",
]
