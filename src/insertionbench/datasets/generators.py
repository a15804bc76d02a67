"""
Input generators for insertion sort benchmarks.

Currently implemented:
- dist == "random":
    Integers drawn uniformly from an inclusive range, default [0, 10n - 1].

- dist == "sorted":
    Strictly increasing [0, 1, ..., n-1].

- dist == "reversed":
    Strictly decreasing [n-1, ..., 0]. Worst case for insertion sort.

- dist == "nearly_sorted":
    Start from [0, 1, ..., n-1] then perform max(1, floor(swap_frac * n))
    random pairwise swaps using the provided RNG.

- dist == "duplicates":
    Values drawn uniformly from [0, k), k defaulting to max(1, n // 10), so
    each value appears about ten times.

Public API (stable):
    make_dataset(n: int, spec: dict | str, rng: numpy.random.Generator) -> list[int]

Conventions:
- `spec` is either {"dist": ..., "params": {...}} or a bare distribution name.
- The benchmark labels "reverse" and "nearlysorted" are accepted as aliases.
- Returns a Python `list[int]` (the sorter stays NumPy-agnostic).
- The caller supplies the RNG. "sorted" and "reversed" ignore it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple, Union

import numpy as np

_LOGGER = logging.getLogger(__name__)

SUPPORTED_DISTS = {
    "random",
    "sorted",
    "reversed",
    "nearly_sorted",
    "duplicates",
}
DIST_ALIASES = {
    "reverse": "reversed",
    "nearlysorted": "nearly_sorted",
}
__all__ = ["SUPPORTED_DISTS", "DIST_ALIASES", "make_dataset", "normalize_dist"]


def normalize_dist(name: str) -> str:
    """Map a distribution name or alias to its canonical name."""
    if not isinstance(name, str):
        raise ValueError(f"dataset dist must be a string; got {name!r}")
    key = name.strip().lower()
    key = DIST_ALIASES.get(key, key)
    if key not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {name!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    return key


def make_dataset(
    n: int, spec: Union[Dict[str, Any], str], rng: np.random.Generator
) -> List[int]:
    """
    Generate an integer dataset according to `spec`, using the provided RNG.

    Parameters
    ----------
    n : int
        Number of elements to generate. Must be >= 0.
    spec : dict | str
        Distribution specification, or just the distribution name.

        Random:
            {"dist": "random", "params": {"range": [min_int, max_int]}}   # inclusive, optional

        Nearly-sorted:
            {"dist": "nearly_sorted", "params": {"swap_frac": 0.05}}      # in [0.0, 1.0]

        Duplicates:
            {"dist": "duplicates", "params": {"k": 10}}                   # #distinct values, optional

        Sorted / Reversed:
            {"dist": "sorted"} / {"dist": "reversed"}                    # params unused

    rng : numpy.random.Generator
        Random number generator owned by the caller (seeded upstream).

    Returns
    -------
    list[int]
        A list of length `n`.

    Raises
    ------
    ValueError
        If inputs are invalid or if the distribution is unsupported.
    """
    _validate_n(n)

    if isinstance(spec, str):
        spec = {"dist": spec}
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict or a distribution name")

    dist = normalize_dist(spec.get("dist", ""))
    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"{dist}.params must be a dict")

    _LOGGER.debug("Generating %s dataset, n=%d", dist, n)
    if n == 0:
        # Still validate params so a bad config fails on the smallest size.
        _validate_params(dist, params)
        return []

    if dist == "sorted":
        return list(range(n))

    if dist == "reversed":
        return list(range(n - 1, -1, -1))

    if dist == "random":
        lo, hi = _parse_range(params, default=(0, 10 * n - 1))
        # Generator.integers is half-open [low, high); +1 makes hi inclusive.
        return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()

    if dist == "nearly_sorted":
        swap_frac = _parse_swap_frac(params)
        arr = list(range(n))
        num_swaps = max(1, int(swap_frac * n))
        idxs = rng.integers(0, n, size=2 * num_swaps)
        for s in range(num_swaps):
            i = int(idxs[2 * s])
            j = int(idxs[2 * s + 1])
            # i == j is a no-op; effective swaps may be fewer than requested
            arr[i], arr[j] = arr[j], arr[i]
        return arr

    if dist == "duplicates":
        k = _parse_k(params, default=max(1, n // 10))
        return rng.integers(0, k, size=n, dtype=np.int64).tolist()

    raise ValueError(f"Unhandled dataset dist: {dist!r}")


# ------------------------- helpers ------------------------- #


def _validate_n(n: int) -> None:
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")


def _validate_params(dist: str, params: Dict[str, Any]) -> None:
    if dist == "random":
        _parse_range(params, default=(0, 0))
    elif dist == "nearly_sorted":
        _parse_swap_frac(params)
    elif dist == "duplicates":
        _parse_k(params, default=1)


def _parse_range(params: Dict[str, Any], default: Tuple[int, int]) -> Tuple[int, int]:
    """
    Parse an optional inclusive integer range from params["range"].
    If not present, return `default`.
    """
    if "range" not in params:
        return default
    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("random.params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("random.params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"random.params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_swap_frac(params: Dict[str, Any]) -> float:
    val = params.get("swap_frac", 0.05)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {val!r}"
        ) from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {x}")
    return x


def _parse_k(params: Dict[str, Any], default: int) -> int:
    k = params.get("k", default)
    if not _is_int_like(k) or k < 1:
        raise ValueError(f"duplicates.params.k must be an integer >= 1; got {k!r}")
    return int(k)


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types, not bools
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
