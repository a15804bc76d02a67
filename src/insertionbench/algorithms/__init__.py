"""
Algorithms package public API.

Re-export the instrumented insertion sort so callers can write:
    from insertionbench.algorithms import InsertionSorter, is_sorted
"""

from .insertion_sort import InsertionSorter, SortConfig, is_sorted

__all__ = ["InsertionSorter", "SortConfig", "is_sorted"]
