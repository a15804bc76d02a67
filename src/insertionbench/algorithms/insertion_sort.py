"""
Instrumented insertion sort, standard and binary-search variants.

Both variants sort a `list[int]` in place and produce the same output for any
input; they differ only in how many operations they perform, which is what
the attached `MetricsCollector` records.

Standard variant (linear backward scan), per outer index i = 1 .. n-1:
    key = arr[i]                                  1 access
    while arr[j] > key: shift arr[j] right        1 comparison, 2 accesses, 1 swap
    scan stopped on an element <= key             1 comparison, 1 access
    arr[j + 1] = key                              1 access
The terminating comparison is counted only when the scan stops on an element
(not when it runs off the left boundary). Benchmark comparability relies on
this exact counting.

Binary-search variant, per outer index i = 1 .. n-1:
    key = arr[i]                                  1 access
    arr[i - 1] <= key -> next i                   1 comparison, 1 access
    binary search over arr[0 .. i-1]              1 comparison, 1 access per step
    bulk shift arr[pos .. i-1] right by one       (i - pos) accesses
    arr[pos] = key                                1 access, 1 swap
On an exact match at `mid` the insertion position is `mid + 1`.

Public API (stable):
    SortConfig
    InsertionSorter
    is_sorted(a) -> bool
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, MutableSequence, Optional, Sequence

from insertionbench.metrics import MetricsCollector

_LOGGER = logging.getLogger(__name__)

__all__ = ["SortConfig", "InsertionSorter", "is_sorted"]


@dataclass(frozen=True)
class SortConfig:
    """Sorter configuration, fixed for the lifetime of a sorter."""

    use_binary_search: bool = True

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]]) -> "SortConfig":
        """
        Build a config from the dict form used in experiment files.

        Accepted keys: "optimize" (preferred) or "use_binary_search".
        Missing keys fall back to the default (optimization enabled).
        """
        if config is None:
            return cls()
        if not isinstance(config, Mapping):
            raise ValueError("config must be a dict if provided")
        unknown = set(config) - {"optimize", "use_binary_search"}
        if unknown:
            raise ValueError(f"Unknown insertion sort config keys: {sorted(unknown)}")
        flag = config.get("optimize", config.get("use_binary_search", True))
        if not isinstance(flag, bool):
            raise ValueError(f"config 'optimize' must be a bool; got {flag!r}")
        return cls(use_binary_search=flag)

    @property
    def label(self) -> str:
        return "opt" if self.use_binary_search else "std"


def is_sorted(a: Optional[Sequence[int]]) -> bool:
    """Return True iff `a` is None, has fewer than 2 elements, or is nondecreasing."""
    if a is None or len(a) <= 1:
        return True
    return all(a[i - 1] <= a[i] for i in range(1, len(a)))


class InsertionSorter:
    """
    Insertion sort with performance instrumentation.

    A sorter owns one `MetricsCollector`, reset at the start of every `sort`
    call. Use one sorter per thread; instances share no state.
    """

    def __init__(self, use_optimization: bool = True) -> None:
        self._config = SortConfig(use_binary_search=bool(use_optimization))
        self._metrics = MetricsCollector()

    @classmethod
    def from_config(cls, config: SortConfig) -> "InsertionSorter":
        return cls(use_optimization=config.use_binary_search)

    @property
    def config(self) -> SortConfig:
        return self._config

    @property
    def use_optimization(self) -> bool:
        return self._config.use_binary_search

    @property
    def metrics(self) -> MetricsCollector:
        """The live collector; its values describe the most recent sort."""
        return self._metrics

    # ------------------------- public entry points ------------------------- #

    def sort(self, a: Optional[MutableSequence[int]]) -> None:
        """
        Sort `a` in place into nondecreasing order.

        Raises
        ------
        ValueError
            If `a` is None. Nothing is reset or mutated in that case.
        """
        if a is None:
            raise ValueError("Array cannot be None")

        m = self._metrics
        m.reset()
        m.start_timing()

        if len(a) <= 1:
            m.stop_timing()
            return

        if self._config.use_binary_search:
            self._sort_binary(a)
        else:
            self._sort_standard(a)

        m.stop_timing()
        _LOGGER.debug("Sorted n=%d (%s): %s", len(a), self._config.label, m.compact_summary())

    def sort_copy(self, a: Optional[Sequence[int]]) -> List[int]:
        """
        Return a sorted copy of `a`, leaving `a` untouched.

        The duplicate counts as one memory allocation. It is recorded after
        the sort, since `sort` resets the collector when it starts.
        """
        if a is None:
            raise ValueError("Array cannot be None")
        copy = list(a)
        self.sort(copy)
        self._metrics.increment_memory_allocation()
        return copy

    is_sorted = staticmethod(is_sorted)

    # ------------------------- algorithms ------------------------- #

    def _sort_standard(self, arr: MutableSequence[int]) -> None:
        m = self._metrics
        for i in range(1, len(arr)):
            key = arr[i]
            m.increment_array_access()
            j = i - 1

            while j >= 0 and arr[j] > key:
                m.increment_comparison()
                m.increment_array_access()  # read arr[j]
                arr[j + 1] = arr[j]
                m.increment_swap()
                m.increment_array_access()  # write arr[j + 1]
                j -= 1

            # comparison that ended the scan (none if we ran off the left end)
            if j >= 0:
                m.increment_comparison()
                m.increment_array_access()

            arr[j + 1] = key
            m.increment_array_access()

    def _sort_binary(self, arr: MutableSequence[int]) -> None:
        m = self._metrics
        for i in range(1, len(arr)):
            key = arr[i]
            m.increment_array_access()

            # already in place relative to its left neighbour
            m.increment_comparison()
            m.increment_array_access()
            if arr[i - 1] <= key:
                continue

            pos = self._insertion_position(arr, key, 0, i - 1)

            arr[pos + 1 : i + 1] = arr[pos:i]
            m.increment_array_access(i - pos)

            arr[pos] = key
            m.increment_swap()
            m.increment_array_access()

    def _insertion_position(
        self, arr: Sequence[int], key: int, left: int, right: int
    ) -> int:
        """Binary search over arr[left .. right] (inclusive); ties go after the equal element."""
        m = self._metrics
        while left <= right:
            mid = left + (right - left) // 2
            m.increment_comparison()
            m.increment_array_access()
            pivot = arr[mid]
            if pivot == key:
                return mid + 1
            if pivot < key:
                left = mid + 1
            else:
                right = mid - 1
        return left
