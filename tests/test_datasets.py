"""
Tests for the synthetic input generators.
"""

from __future__ import annotations

import numpy as np
import pytest

from insertionbench.datasets import SUPPORTED_DISTS, make_dataset, normalize_dist


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.mark.parametrize("dist", sorted(SUPPORTED_DISTS))
@pytest.mark.parametrize("n", [0, 1, 17, 200])
def test_length_and_type(dist: str, n: int, rng: np.random.Generator) -> None:
    out = make_dataset(n, {"dist": dist}, rng)
    assert len(out) == n
    assert all(type(x) is int for x in out)


def test_sorted_and_reversed_are_deterministic(rng: np.random.Generator) -> None:
    assert make_dataset(5, "sorted", rng) == [0, 1, 2, 3, 4]
    assert make_dataset(5, "reversed", rng) == [4, 3, 2, 1, 0]
    assert make_dataset(5, "reverse", rng) == [4, 3, 2, 1, 0]


def test_random_default_range(rng: np.random.Generator) -> None:
    out = make_dataset(500, "random", rng)
    assert min(out) >= 0
    assert max(out) <= 10 * 500 - 1


def test_random_explicit_range_inclusive(rng: np.random.Generator) -> None:
    out = make_dataset(300, {"dist": "random", "params": {"range": [-2, 2]}}, rng)
    assert set(out) <= {-2, -1, 0, 1, 2}
    assert {-2, 2} <= set(out)


def test_nearly_sorted_is_permutation_with_few_displacements(rng: np.random.Generator) -> None:
    n = 1000
    out = make_dataset(n, {"dist": "nearly_sorted", "params": {"swap_frac": 0.01}}, rng)
    assert sorted(out) == list(range(n))
    displaced = sum(1 for i, v in enumerate(out) if i != v)
    # 10 swaps move at most 20 elements
    assert displaced <= 20


def test_nearly_sorted_alias(rng: np.random.Generator) -> None:
    out = make_dataset(50, "nearlysorted", rng)
    assert sorted(out) == list(range(50))


def test_duplicates_value_domain(rng: np.random.Generator) -> None:
    out = make_dataset(200, "duplicates", rng)
    assert set(out) <= set(range(20))
    assert len(set(out)) < len(out)


def test_duplicates_explicit_k(rng: np.random.Generator) -> None:
    out = make_dataset(100, {"dist": "duplicates", "params": {"k": 3}}, rng)
    assert set(out) <= {0, 1, 2}


def test_same_seed_same_output() -> None:
    a = make_dataset(100, "random", np.random.default_rng(7))
    b = make_dataset(100, "random", np.random.default_rng(7))
    assert a == b


def test_normalize_dist() -> None:
    assert normalize_dist("Reverse") == "reversed"
    assert normalize_dist("nearly_sorted") == "nearly_sorted"
    with pytest.raises(ValueError):
        normalize_dist("zigzag")


@pytest.mark.parametrize(
    "n, spec",
    [
        (-1, "random"),
        (True, "random"),
        (10, {"dist": "nope"}),
        (10, {"dist": "random", "params": {"range": [5, 1]}}),
        (10, {"dist": "random", "params": {"range": [0.5, 1]}}),
        (10, {"dist": "nearly_sorted", "params": {"swap_frac": 1.5}}),
        (0, {"dist": "nearly_sorted", "params": {"swap_frac": "lots"}}),
        (10, {"dist": "duplicates", "params": {"k": 0}}),
        (10, 42),
    ],
)
def test_invalid_inputs_raise(n, spec, rng: np.random.Generator) -> None:
    with pytest.raises(ValueError):
        make_dataset(n, spec, rng)
