"""
Performance counters for instrumented sorting runs.

A `MetricsCollector` is a small mutable aggregate owned by exactly one sorter.
The sorter resets and starts it at the beginning of every `sort` call and
stops it at the end; callers read counters and elapsed time afterwards.

Counters tracked:
- comparisons         one evaluation of <, >, <= or == between two elements
- swaps               one logical move of a value into a new slot
- array_accesses      one logical read or write of an element
- memory_allocations  one buffer duplication (e.g. in `sort_copy`)

Timing uses `time.perf_counter_ns()` (monotonic, ns resolution).

Conventions:
- Elapsed time reads as 0 until `stop_timing()` has closed a start/stop pair.
  While timing is active the previous end instant is stale, so reads also
  return 0 in that state.
- Counters only grow between resets; negative increments are rejected.

Public API (stable):
    MetricsCollector
    CSV_HEADER
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from insertionbench.metrics.export import CSV_HEADER, append_record

_LOGGER = logging.getLogger(__name__)

__all__ = ["CSV_HEADER", "MetricsCollector"]


def _check_amount(n: int) -> int:
    if n < 0:
        raise ValueError(f"increment amount must be nonnegative; got {n}")
    return n


class MetricsCollector:
    """Counters plus a start/stop timer for one sort run."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Zero all counters and clear timing state."""
        self._comparisons = 0
        self._swaps = 0
        self._array_accesses = 0
        self._memory_allocations = 0
        self._start_ns: Optional[int] = None
        self._end_ns: Optional[int] = None
        self._timing = False

    # ------------------------- timing ------------------------- #

    def start_timing(self) -> None:
        # No guard: a second start overwrites the first instant.
        self._start_ns = time.perf_counter_ns()
        self._timing = True

    def stop_timing(self) -> None:
        if self._timing:
            self._end_ns = time.perf_counter_ns()
            self._timing = False

    @property
    def is_timing(self) -> bool:
        return self._timing

    # ------------------------- counters ------------------------- #

    def increment_comparison(self, n: int = 1) -> None:
        self._comparisons += _check_amount(n)

    def increment_swap(self, n: int = 1) -> None:
        self._swaps += _check_amount(n)

    def increment_array_access(self, n: int = 1) -> None:
        self._array_accesses += _check_amount(n)

    def increment_memory_allocation(self, n: int = 1) -> None:
        self._memory_allocations += _check_amount(n)

    @property
    def comparisons(self) -> int:
        return self._comparisons

    @property
    def swaps(self) -> int:
        return self._swaps

    @property
    def array_accesses(self) -> int:
        return self._array_accesses

    @property
    def memory_allocations(self) -> int:
        return self._memory_allocations

    # ------------------------- derived reads ------------------------- #

    @property
    def elapsed_ns(self) -> int:
        if self._timing or self._start_ns is None or self._end_ns is None:
            return 0
        return self._end_ns - self._start_ns

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000.0

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ns / 1_000_000_000.0

    # ------------------------- reporting ------------------------- #

    def to_record(self, array_size: int, data_type: str) -> Dict[str, Any]:
        """
        Return the reporting record for the current counters.

        Schema:
            {
                "array_size": int,
                "data_type": str,
                "comparisons": int,
                "swaps": int,
                "array_accesses": int,
                "memory_allocations": int,
                "time_nanos": int,
                "time_millis": float,
            }
        """
        return {
            "array_size": int(array_size),
            "data_type": str(data_type),
            "comparisons": self._comparisons,
            "swaps": self._swaps,
            "array_accesses": self._array_accesses,
            "memory_allocations": self._memory_allocations,
            "time_nanos": self.elapsed_ns,
            "time_millis": self.elapsed_ms,
        }

    def export_csv(
        self, path: Union[str, Path], array_size: int, data_type: str
    ) -> Path:
        """
        Append one CSV line for the current counters to `path`.

        The header line is written only when the file is new or empty.
        """
        out = append_record(path, self.to_record(array_size, data_type))
        _LOGGER.debug("Exported metrics for n=%d (%s) to %s", array_size, data_type, out)
        return out

    def summary(self) -> str:
        """Multi-line human-readable summary."""
        return (
            "Performance Metrics:\n"
            f"  Comparisons: {self._comparisons:,}\n"
            f"  Swaps: {self._swaps:,}\n"
            f"  Array Accesses: {self._array_accesses:,}\n"
            f"  Memory Allocations: {self._memory_allocations:,}\n"
            f"  Execution Time: {self.elapsed_ms:.6f} ms "
            f"({self.elapsed_ns / 1000.0:.2f} µs)"
        )

    def compact_summary(self) -> str:
        return (
            f"comp={self._comparisons}, swaps={self._swaps}, "
            f"accesses={self._array_accesses}, allocs={self._memory_allocations}, "
            f"time={self.elapsed_ms:.6f}ms"
        )

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        return f"MetricsCollector({self.compact_summary()})"
