"""
Validation utilities public API.

Re-exports:
    - Oracle:
        ORACLE_NAME, oracle_sort, equals_oracle

    - Property checks:
        first_violation_index, is_permutation, permutation_counter_diff,
        assert_no_mutation, check_sort_output
"""

from .oracle import ORACLE_NAME, equals_oracle, oracle_sort
from .properties import (
    assert_no_mutation,
    check_sort_output,
    first_violation_index,
    is_permutation,
    permutation_counter_diff,
)

__all__ = [
    "ORACLE_NAME",
    "oracle_sort",
    "equals_oracle",
    "first_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
    "check_sort_output",
]
