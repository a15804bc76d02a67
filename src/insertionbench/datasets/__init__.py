"""
Datasets package public API.

Re-export the dataset generator so callers can write:
    from insertionbench.datasets import make_dataset, SUPPORTED_DISTS
"""

from .generators import DIST_ALIASES, SUPPORTED_DISTS, make_dataset, normalize_dist

__all__ = ["make_dataset", "normalize_dist", "SUPPORTED_DISTS", "DIST_ALIASES"]
