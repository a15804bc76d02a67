"""
insertionbench: instrumented insertion sort and a small benchmark harness.

    from insertionbench import InsertionSorter

    sorter = InsertionSorter(use_optimization=True)
    sorter.sort(data)
    print(sorter.metrics)
"""

from .algorithms import InsertionSorter, SortConfig, is_sorted
from .metrics import MetricsCollector

__version__ = "0.1.0"

__all__ = ["InsertionSorter", "SortConfig", "MetricsCollector", "is_sorted", "__version__"]
