"""
Reference ordering for checking sorter output.

Python's built-in `sorted()` is the oracle: for integers it gives the unique
nondecreasing arrangement, so any correct insertion sort run must match it
element for element, whichever variant ran.
"""

from __future__ import annotations

from typing import List, Sequence

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(a: Sequence[int]) -> List[int]:
    """Return a new sorted list; `a` is not mutated."""
    return sorted(a)


def equals_oracle(original: Sequence[int], out: Sequence[int]) -> bool:
    """True iff `out` equals `oracle_sort(original)` exactly."""
    return list(out) == oracle_sort(original)
