"""Throughput benchmarks for transcoding and streaming reads.

Times each lenient conversion direction, the strict decoder and the streaming
reader over in-memory samples, and tracks resident memory with psutil.
"""

import gc
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import psutil

from ..codec.transcoder import Transcoder
from ..shared.errors import MalformedSequenceError
from ..shared.logging import get_logger
from ..stream.reader import StreamingReader
from ..stream.source import BytesSource

BENCHMARK_METRICS = ("processing_time_ms", "memory_used_mb", "bytes_per_second")


@dataclass
class BenchmarkResult:
    """Result of a single timed operation."""

    operation: str
    sample: str
    processing_time_ms: float
    memory_used_mb: float
    bytes_processed: int
    units_produced: int
    success: bool
    error_message: Optional[str] = None

    @property
    def bytes_per_second(self) -> float:
        """Input bytes processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_processed * 1000.0) / self.processing_time_ms


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical summaries."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Transcoding Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        """Add a benchmark result to the suite."""
        self.results.append(result)

    def get_results_by_operation(self, operation: str) -> List[BenchmarkResult]:
        """All results for one operation."""
        return [r for r in self.results if r.operation == operation]

    def get_statistics(self, operation: str, metric: str) -> Dict[str, float]:
        """Min/max/mean/median/stdev of ``metric`` for one operation."""
        if metric not in BENCHMARK_METRICS:
            raise ValueError(f"metric must be one of {BENCHMARK_METRICS}")
        values = [
            getattr(r, metric) for r in self.get_results_by_operation(operation)
            if r.success
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

    def to_dict(self) -> Dict[str, Any]:
        """Summarise the suite per operation."""
        operations = sorted({r.operation for r in self.results})
        summary = {}
        for operation in operations:
            results = self.get_results_by_operation(operation)
            successful = [r for r in results if r.success]
            summary[operation] = {
                "total_runs": len(results),
                "successful_runs": len(successful),
                "throughput": self.get_statistics(operation, "bytes_per_second"),
                "memory": self.get_statistics(operation, "memory_used_mb"),
            }
        return {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "summary": summary,
        }


def default_samples() -> Dict[str, bytes]:
    """Representative inputs: ASCII, mixed scripts, emoji and damaged bytes."""
    ascii_text = ("The quick brown fox jumps over the lazy dog.\n" * 200).encode()
    mixed = ("Grüße, 世界! Привет, мир. Καλημέρα κόσμε.\n" * 200).encode()
    emoji = ("\U0001F600 \U0001F680 \U0001F4A1 text\n" * 200).encode()
    damaged = (b"valid \xc0\x80 overlong \xed\xa0\x80 surrogate \xff\n" * 200)
    return {
        "ascii": ascii_text,
        "mixed_scripts": mixed,
        "supplementary": emoji,
        "malformed": damaged,
    }


class TranscodingBenchmark:
    """Benchmarks every conversion direction and the streaming reader."""

    def __init__(
        self,
        samples: Optional[Dict[str, bytes]] = None,
        warmup_runs: int = 1,
        benchmark_runs: int = 5,
    ) -> None:
        if warmup_runs < 0:
            raise ValueError("warmup_runs must be >= 0")
        if benchmark_runs <= 0:
            raise ValueError("benchmark_runs must be > 0")
        self.samples = samples if samples is not None else default_samples()
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.transcoder = Transcoder()
        self.logger = get_logger(__name__, component="benchmark")

    def _measure_memory_usage(self) -> float:
        """Current resident memory in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def _operations(self) -> Dict[str, Callable[[bytes], int]]:
        """Map operation names to callables returning the size of their output."""
        t = self.transcoder

        def read_all_lines(data: bytes) -> int:
            reader = StreamingReader(BytesSource(data))
            return sum(1 for _ in reader.iter_lines())

        return {
            "utf8_to_utf32": lambda data: len(t.utf8_to_utf32(data)),
            "utf8_to_utf16": lambda data: len(t.utf8_to_utf16(data)),
            "utf32_to_utf8": lambda data: len(t.utf32_to_utf8(t.utf8_to_utf32(data))),
            "utf16_to_utf8": lambda data: len(t.utf16_to_utf8(t.utf8_to_utf16(data))),
            "utf16_to_utf32": lambda data: len(t.utf16_to_utf32(t.utf8_to_utf16(data))),
            "utf32_to_utf16": lambda data: len(t.utf32_to_utf16(t.utf8_to_utf32(data))),
            "utf8_to_utf32_strict": lambda data: len(t.utf8_to_utf32_strict(data)),
            "reader_lines": read_all_lines,
        }

    def _run_one(
        self, operation: str, func: Callable[[bytes], int], sample: str, data: bytes
    ) -> BenchmarkResult:
        """Time one call of ``func`` on ``data`` and record its memory delta."""
        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.perf_counter()
        try:
            produced = func(data)
            success, error_message = True, None
        except MalformedSequenceError as e:
            # Expected for the strict decoder on damaged samples
            produced, success, error_message = 0, False, str(e)
        processing_time = (time.perf_counter() - start_time) * 1000
        memory_used = max(0.0, self._measure_memory_usage() - memory_before)

        return BenchmarkResult(
            operation=operation,
            sample=sample,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            bytes_processed=len(data),
            units_produced=produced,
            success=success,
            error_message=error_message,
        )

    def run(self, operations: Optional[List[str]] = None) -> BenchmarkSuite:
        """Run the benchmark.

        Args:
            operations: Subset of operation names to run (default: all)

        Returns:
            BenchmarkSuite with one result per operation, sample and run
        """
        available = self._operations()
        selected = operations or list(available)
        unknown = [name for name in selected if name not in available]
        if unknown:
            raise ValueError(f"Unknown operations: {unknown}")

        suite = BenchmarkSuite()
        for operation in selected:
            func = available[operation]
            for sample, data in self.samples.items():
                for _ in range(self.warmup_runs):
                    self._run_one(operation, func, sample, data)
                for _ in range(self.benchmark_runs):
                    suite.add_result(self._run_one(operation, func, sample, data))
            self.logger.debug(f"Benchmarked {operation}")
        return suite
