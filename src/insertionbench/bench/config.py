"""
Experiment configuration (YAML).

Example:

    experiment_name: nearly_sorted_scaling
    output_dir: results
    seed: 42
    repeats: 5
    warmup: true
    disable_gc: true
    timeout_seconds: 30
    sizes: [100, 1000, 5000]
    datasets:
      - random
      - dist: nearly_sorted
        params: {swap_frac: 0.02}
        label: nearly_sorted_2pct
    variants:
      - name: standard
        config: {optimize: false}
      - name: binary
        config: {optimize: true}

`datasets` entries are a distribution name or a `make_dataset` spec dict with
an optional `label` (defaults to the distribution name). `variants` entries
name a sorter configuration; `config` is passed to `SortConfig.from_mapping`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from insertionbench.algorithms import SortConfig
from insertionbench.datasets import normalize_dist

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "datasets",
    "sizes",
    "variants",
]

__all__ = [
    "REQUIRED_KEYS",
    "DatasetSpec",
    "VariantSpec",
    "ExperimentConfig",
    "load_yaml",
    "write_yaml",
    "load_config",
]


@dataclass(frozen=True)
class DatasetSpec:
    label: str
    spec: Dict[str, Any]


@dataclass(frozen=True)
class VariantSpec:
    name: str
    config: SortConfig


@dataclass
class ExperimentConfig:
    experiment_name: str
    output_dir: Path
    seed: int
    repeats: int
    warmup: bool
    disable_gc: bool
    timeout_seconds: float
    datasets: List[DatasetSpec]
    sizes: List[int]
    variants: List[VariantSpec]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "ExperimentConfig":
        if not isinstance(cfg, dict):
            raise ValueError("Experiment config must be a mapping")
        missing = [k for k in REQUIRED_KEYS if k not in cfg]
        if missing:
            raise ValueError(f"Missing required config keys: {missing}")

        raw_sizes = cfg["sizes"]
        if (
            not isinstance(raw_sizes, list)
            or not raw_sizes
            or any(isinstance(n, bool) or not isinstance(n, int) or n < 0 for n in raw_sizes)
        ):
            raise ValueError(
                f"Config 'sizes' must be a non-empty list of nonnegative integers; got {raw_sizes!r}"
            )
        sizes = list(raw_sizes)

        repeats = int(cfg["repeats"])
        if repeats < 1:
            raise ValueError("Config 'repeats' must be >= 1")
        timeout_seconds = float(cfg["timeout_seconds"])
        if timeout_seconds <= 0:
            raise ValueError("Config 'timeout_seconds' must be positive")

        return cls(
            experiment_name=str(cfg["experiment_name"]),
            output_dir=Path(cfg["output_dir"]),
            seed=int(cfg["seed"]),
            repeats=repeats,
            warmup=bool(cfg["warmup"]),
            disable_gc=bool(cfg["disable_gc"]),
            timeout_seconds=timeout_seconds,
            datasets=_resolve_datasets(cfg["datasets"]),
            sizes=sizes,
            variants=_resolve_variants(cfg["variants"]),
            raw=dict(cfg),
        )


def _resolve_datasets(entries: Any) -> List[DatasetSpec]:
    if not isinstance(entries, list) or not entries:
        raise ValueError("Config 'datasets' must be a non-empty list")
    out: List[DatasetSpec] = []
    seen = set()
    for entry in entries:
        if isinstance(entry, str):
            entry = {"dist": entry}
        if not isinstance(entry, dict) or "dist" not in entry:
            raise ValueError(f"Each dataset must be a name or a dict with 'dist': {entry!r}")
        dist = normalize_dist(entry["dist"])
        label = str(entry.get("label", dist))
        if label in seen:
            raise ValueError(f"Duplicate dataset label in config: {label}")
        seen.add(label)
        spec = {"dist": dist, "params": dict(entry.get("params") or {})}
        out.append(DatasetSpec(label=label, spec=spec))
    return out


def _resolve_variants(entries: Any) -> List[VariantSpec]:
    if not isinstance(entries, list) or not entries:
        raise ValueError("Config 'variants' must be a non-empty list")
    out: List[VariantSpec] = []
    seen = set()
    for entry in entries:
        name = entry.get("name") if isinstance(entry, dict) else None
        if not name or not isinstance(name, str):
            raise ValueError("Each variant must have a string 'name' field")
        if name in seen:
            raise ValueError(f"Duplicate variant name in config: {name}")
        seen.add(name)
        try:
            config = SortConfig.from_mapping(entry.get("config"))
        except ValueError as e:
            raise ValueError(f"Variant '{name}': {e}") from e
        out.append(VariantSpec(name=name, config=config))
    return out


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def load_config(path: Union[str, Path]) -> ExperimentConfig:
    return ExperimentConfig.from_dict(load_yaml(Path(path)))
