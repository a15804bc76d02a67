"""
Property checks for sorter output.

Used by the tests and by the benchmark runner's "sorted correctly" column.

Public API (stable):
    first_violation_index(xs) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict[int, int]
    assert_no_mutation(before, after) -> None
    check_sort_output(original, out) -> list[str]

Stability is not checked here: equal integers are indistinguishable, so it
cannot be observed from values alone.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence

from .oracle import oracle_sort

__all__ = [
    "first_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
    "check_sort_output",
]


def first_violation_index(xs: Sequence[int]) -> Optional[int]:
    """
    Return the first index i where xs[i] > xs[i+1], or None if nondecreasing.

        i = first_violation_index(out)
        assert i is None, f"not sorted at i={i}: {out[i]} > {out[i+1]}"
    """
    for i in range(len(xs) - 1):
        if xs[i] > xs[i + 1]:
            return i
    return None


def is_permutation(a: Sequence[int], b: Sequence[int]) -> bool:
    """True iff `a` and `b` hold the same multiset of values."""
    return len(a) == len(b) and Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[int], b: Sequence[int]) -> Dict[int, int]:
    """
    Return value -> (count in a - count in b) for every value whose counts differ.

    Empty dict means identical multiplicities.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def assert_no_mutation(before: Sequence[int], after: Sequence[int]) -> None:
    """Raise AssertionError naming the first difference if the sequences differ."""
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x}, after={y}")


def check_sort_output(original: Sequence[int], out: Sequence[int]) -> List[str]:
    """
    Validate `out` as a sorting of `original`.

    Returns a list of human-readable problems; empty means the output is correct.
    """
    problems: List[str] = []
    if len(out) != len(original):
        problems.append(f"length changed: {len(original)} -> {len(out)}")
    i = first_violation_index(out)
    if i is not None:
        problems.append(f"not nondecreasing at i={i}: {out[i]} > {out[i + 1]}")
    diff = permutation_counter_diff(original, out)
    if diff:
        sample = dict(sorted(diff.items())[:5])
        problems.append(f"values not preserved (count diffs, first 5): {sample}")
    if not problems and list(out) != oracle_sort(original):
        problems.append("output differs from oracle")
    return problems
