"""
Tests for MetricsCollector and the exact counter values each sort variant produces.

Counter expectations below are worked out by hand from the counting rules in
insertionbench.algorithms.insertion_sort; benchmark comparability depends on
them staying exactly as they are.
"""

from __future__ import annotations

import itertools
from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from insertionbench.algorithms import InsertionSorter
from insertionbench.metrics import MetricsCollector
from insertionbench.metrics import collector as collector_module


# ------------------------- helpers ------------------------- #

def _fake_clock(monkeypatch: pytest.MonkeyPatch, *values: int) -> None:
    ticks = iter(values)
    monkeypatch.setattr(collector_module.time, "perf_counter_ns", lambda: next(ticks))


def _inversions(a: List[int]) -> int:
    return sum(1 for i, j in itertools.combinations(range(len(a)), 2) if a[i] > a[j])


def _counts(sorter: InsertionSorter) -> tuple:
    m = sorter.metrics
    return (m.comparisons, m.swaps, m.array_accesses, m.memory_allocations)


# ------------------------- collector ------------------------- #

def test_new_collector_is_empty() -> None:
    m = MetricsCollector()
    assert (m.comparisons, m.swaps, m.array_accesses, m.memory_allocations) == (0, 0, 0, 0)
    assert m.elapsed_ns == 0
    assert m.elapsed_ms == 0.0
    assert not m.is_timing


def test_increments_default_and_amount() -> None:
    m = MetricsCollector()
    m.increment_comparison()
    m.increment_comparison(4)
    m.increment_swap(2)
    m.increment_array_access()
    m.increment_memory_allocation(3)
    assert m.comparisons == 5
    assert m.swaps == 2
    assert m.array_accesses == 1
    assert m.memory_allocations == 3


def test_negative_increment_rejected() -> None:
    m = MetricsCollector()
    with pytest.raises(ValueError):
        m.increment_swap(-1)
    assert m.swaps == 0


def test_reset_clears_everything(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_clock(monkeypatch, 100, 200)
    m = MetricsCollector()
    m.increment_comparison(7)
    m.start_timing()
    m.stop_timing()
    assert m.elapsed_ns == 100
    m.reset()
    assert m.comparisons == 0
    assert m.elapsed_ns == 0


def test_elapsed_units(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_clock(monkeypatch, 1_000, 2_501_000)
    m = MetricsCollector()
    m.start_timing()
    assert m.is_timing
    m.stop_timing()
    assert not m.is_timing
    assert m.elapsed_ns == 2_500_000
    assert m.elapsed_ms == pytest.approx(2.5)
    assert m.elapsed_seconds == pytest.approx(0.0025)


def test_elapsed_is_zero_until_stopped(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_clock(monkeypatch, 5_000)
    m = MetricsCollector()
    m.start_timing()
    assert m.elapsed_ns == 0


def test_stop_without_start_is_noop(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_clock(monkeypatch, 10, 40)
    m = MetricsCollector()
    m.stop_timing()
    assert m.elapsed_ns == 0
    m.start_timing()
    m.stop_timing()
    # second stop must not consume a clock tick or move the end instant
    m.stop_timing()
    assert m.elapsed_ns == 30


def test_restart_overwrites_start(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_clock(monkeypatch, 10, 20, 50)
    m = MetricsCollector()
    m.start_timing()
    m.start_timing()
    m.stop_timing()
    assert m.elapsed_ns == 30


def test_summaries_show_all_counters(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_clock(monkeypatch, 0, 1_234_567)
    m = MetricsCollector()
    m.increment_comparison(1234)
    m.increment_swap(56)
    m.increment_array_access(789)
    m.increment_memory_allocation(2)
    m.start_timing()
    m.stop_timing()

    full = str(m)
    assert "Comparisons: 1,234" in full
    assert "Swaps: 56" in full
    assert "Array Accesses: 789" in full
    assert "Memory Allocations: 2" in full
    assert "1.234567 ms" in full
    assert "\n" in full

    compact = m.compact_summary()
    assert "\n" not in compact
    assert "comp=1234" in compact
    assert "swaps=56" in compact
    assert "accesses=789" in compact
    assert "allocs=2" in compact
    assert "time=1.234567ms" in compact


def test_to_record_schema(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_clock(monkeypatch, 0, 1_500)
    m = MetricsCollector()
    m.increment_comparison(3)
    m.start_timing()
    m.stop_timing()
    assert m.to_record(7, "random_std") == {
        "array_size": 7,
        "data_type": "random_std",
        "comparisons": 3,
        "swaps": 0,
        "array_accesses": 0,
        "memory_allocations": 0,
        "time_nanos": 1_500,
        "time_millis": pytest.approx(0.0015),
    }


# ------------------------- sorter instrumentation ------------------------- #

@pytest.mark.parametrize("use_opt", [False, True])
@pytest.mark.parametrize("a", [[], [42]])
def test_trivial_inputs_count_nothing(use_opt: bool, a: List[int]) -> None:
    sorter = InsertionSorter(use_opt)
    sorter.sort(a)
    assert _counts(sorter) == (0, 0, 0, 0)
    assert not sorter.metrics.is_timing


def test_standard_counts_small_example() -> None:
    sorter = InsertionSorter(False)
    sorter.sort([3, 1, 2])
    assert _counts(sorter) == (3, 2, 9, 0)


def test_binary_counts_small_example() -> None:
    sorter = InsertionSorter(True)
    sorter.sort([3, 1, 2])
    assert _counts(sorter) == (5, 2, 11, 0)


def test_binary_counts_with_equal_midpoint() -> None:
    sorter = InsertionSorter(True)
    sorter.sort([1, 2, 3, 2])
    assert _counts(sorter) == (4, 1, 9, 0)


def test_sorted_input_binary_has_no_shifts() -> None:
    sorter = InsertionSorter(True)
    sorter.sort(list(range(1, 11)))
    assert sorter.metrics.swaps == 0
    assert sorter.metrics.comparisons == 9
    assert sorter.metrics.array_accesses == 18


def test_sorted_input_standard_counts_terminating_comparison() -> None:
    sorter = InsertionSorter(False)
    sorter.sort(list(range(1, 11)))
    assert sorter.metrics.swaps == 0
    assert sorter.metrics.comparisons == 9
    assert sorter.metrics.array_accesses == 27


def test_reverse_input_standard_counts() -> None:
    sorter = InsertionSorter(False)
    arr = list(range(10, 0, -1))
    sorter.sort(arr)
    assert arr == list(range(1, 11))
    # every scan runs off the left end, so no terminating comparison
    assert sorter.metrics.comparisons == 45
    assert sorter.metrics.swaps == 45
    assert sorter.metrics.array_accesses == 108


def test_all_equal_standard_counts() -> None:
    sorter = InsertionSorter(False)
    sorter.sort([7, 7, 7])
    assert _counts(sorter) == (2, 0, 6, 0)


def test_sort_resets_between_runs() -> None:
    sorter = InsertionSorter(False)
    sorter.sort(list(range(10, 0, -1)))
    sorter.sort([1, 2])
    assert sorter.metrics.comparisons == 1
    assert sorter.metrics.swaps == 0


def test_sort_copy_counts_one_allocation() -> None:
    sorter = InsertionSorter()
    sorter.sort_copy([3, 1, 2])
    assert sorter.metrics.memory_allocations == 1
    sorter.sort([3, 1, 2])
    assert sorter.metrics.memory_allocations == 0


def test_sort_stops_timing() -> None:
    sorter = InsertionSorter(False)
    sorter.sort(list(range(200, 0, -1)))
    assert not sorter.metrics.is_timing
    assert sorter.metrics.elapsed_ns > 0


def test_binary_moves_fewer_elements_on_far_swaps() -> None:
    base = list(range(1000))
    base[10], base[500] = base[500], base[10]
    base[50], base[800] = base[800], base[50]

    std = InsertionSorter(False)
    opt = InsertionSorter(True)
    a1, a2 = list(base), list(base)
    std.sort(a1)
    opt.sort(a2)
    assert a1 == a2
    # far swaps leave many keys out of place, so binary search costs more
    # comparisons here; the bulk shift still records one move per key
    assert opt.metrics.swaps < std.metrics.swaps
    assert opt.metrics.comparisons > std.metrics.comparisons


def test_binary_saves_accesses_on_adjacent_swaps() -> None:
    base = list(range(1000))
    base[10], base[11] = base[11], base[10]
    base[500], base[501] = base[501], base[500]

    std = InsertionSorter(False)
    opt = InsertionSorter(True)
    a1, a2 = list(base), list(base)
    std.sort(a1)
    opt.sort(a2)
    assert a1 == a2 == list(range(1000))
    # one terminating comparison per index plus one per shift
    assert std.metrics.comparisons == 1001
    assert std.metrics.array_accesses == 3001
    assert std.metrics.swaps == opt.metrics.swaps == 2
    assert opt.metrics.array_accesses < std.metrics.array_accesses


def test_binary_comparisons_linear_on_sorted() -> None:
    counts = []
    for n in (1000, 2000, 4000):
        sorter = InsertionSorter(True)
        sorter.sort(list(range(n)))
        counts.append(sorter.metrics.comparisons)
    assert counts == [999, 1999, 3999]


def test_standard_comparisons_quadratic_on_reverse() -> None:
    counts = []
    for n in (100, 200, 400):
        sorter = InsertionSorter(False)
        sorter.sort(list(range(n, 0, -1)))
        counts.append(sorter.metrics.comparisons)
    assert counts == [n * (n - 1) // 2 for n in (100, 200, 400)]
    assert 15 <= counts[2] / counts[0] <= 17


@settings(deadline=None, max_examples=80)
@given(st.lists(st.integers(min_value=-50, max_value=50), min_size=0, max_size=80))
def test_property_standard_swaps_equal_inversions(a: List[int]) -> None:
    sorter = InsertionSorter(False)
    sorter.sort(list(a))
    assert sorter.metrics.swaps == _inversions(a)
    # each shift has its own comparison; at most one extra per outer index
    n = len(a)
    extra = sorter.metrics.comparisons - sorter.metrics.swaps
    assert 0 <= extra <= max(0, n - 1)


@settings(deadline=None, max_examples=80)
@given(st.lists(st.integers(min_value=-50, max_value=50), min_size=2, max_size=80))
def test_property_binary_swaps_count_out_of_place_keys(a: List[int]) -> None:
    sorter = InsertionSorter(True)
    arr = list(a)
    sorter.sort(arr)
    assert sorter.metrics.comparisons >= len(a) - 1
    assert sorter.metrics.swaps <= len(a) - 1
    if sorter.metrics.swaps == 0:
        assert a == arr
