"""
Experiment runner: orchestrates a benchmarking sweep from a YAML config.

Usage (from repo root):
    insertionbench run experiments/configs/01_scaling.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per sample (metrics record + context)
    - metrics.csv             # the same samples in the fixed metrics CSV layout
    - summary.csv             # median + IQR time and median counters per (variant, dataset, n)
    - (console) rich/tqdm summaries

Design notes:
- For each dataset and size n, we generate ONE input and give it to every variant.
- The harness copies the input per sample; the sorter times only the sort itself.
- On timeout/error for a variant at size n, we skip larger sizes for that
  variant on the same dataset.
"""

from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import platform
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import psutil
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from insertionbench.bench.config import ExperimentConfig, load_config, write_yaml
from insertionbench.bench.measure import measure_sort_call
from insertionbench.datasets import make_dataset
from insertionbench.metrics import append_records

_LOGGER = logging.getLogger(__name__)
_console = Console()

SUMMARY_COLUMNS = [
    "variant",
    "dataset",
    "n",
    "samples_ok",
    "median_ns",
    "iqr_ns",
    "min_ns",
    "max_ns",
    "comparisons",
    "swaps",
    "array_accesses",
]

__all__ = ["run_experiment", "aggregate_summary"]


# ------------------------- helpers: IO & meta ------------------------- #

def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _read_jsonl(path: Path) -> List[Dict[str, Any]]:
    with path.open("r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    # Two runs within the same second get a numeric suffix.
    suffix = 1
    candidate = run_dir
    while candidate.exists():
        candidate = run_dir.with_name(f"{run_dir.name}_{suffix}")
        suffix += 1
    candidate.mkdir(parents=False, exist_ok=False)
    return candidate


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


# ------------------------- aggregation ------------------------- #

def aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    """Aggregate sample lines of `results.jsonl` into one row per (variant, dataset, n)."""
    empty = pd.DataFrame(columns=SUMMARY_COLUMNS)
    if not jsonl_path.exists():
        return empty
    df = pd.DataFrame(_read_jsonl(jsonl_path))
    # Only sample lines carry time_nanos; status lines (timeout/error) do not.
    if df.empty or "time_nanos" not in df.columns:
        return empty
    df = df[df["time_nanos"].notna()]
    if df.empty:
        return empty

    out = (
        df.groupby(["variant", "dataset", "n"], as_index=False)
        .agg(
            samples_ok=("time_nanos", "count"),
            median_ns=("time_nanos", "median"),
            iqr_ns=("time_nanos", lambda s: s.quantile(0.75) - s.quantile(0.25)),
            min_ns=("time_nanos", "min"),
            max_ns=("time_nanos", "max"),
            comparisons=("comparisons", "median"),
            swaps=("swaps", "median"),
            array_accesses=("array_accesses", "median"),
        )
    )
    # medians of an even sample count can land on .5, so only exact columns are int
    int_cols = ["samples_ok", "min_ns", "max_ns"]
    out[int_cols] = out[int_cols].astype("int64")
    return out.sort_values(["dataset", "variant", "n"], ignore_index=True)[SUMMARY_COLUMNS]


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    table = Table(title="Benchmark Summary (median ± IQR in ms, comparisons)")
    table.add_column("Variant", style="bold")
    table.add_column("Dataset")
    picks: List[int] = []
    if sizes:
        picks = sorted({sizes[0], sizes[len(sizes) // 2], sizes[-1]})
    for npick in picks:
        table.add_column(f"n={npick}", justify="right")

    def _format_cell(row: pd.Series) -> str:
        median_ms = row["median_ns"] / 1e6
        iqr_ms = row["iqr_ns"] / 1e6
        return f"{median_ms:.2f} ± {iqr_ms:.2f}\n{row['comparisons']:,.0f} cmp"

    if summary.empty:
        _console.print("(no samples)")
        return

    for (variant, dataset), group in summary.groupby(["variant", "dataset"], sort=False):
        row = [f"[bold]{variant}[/]", str(dataset)]
        for npick in picks:
            s = group[group["n"] == npick]
            row.append("—" if s.empty else _format_cell(s.iloc[0]))
        table.add_row(*row)
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg: ExperimentConfig = load_config(config_path)
    sizes = sorted(cfg.sizes)

    run_dir = _ensure_run_dir(cfg.output_dir, cfg.experiment_name)
    results_path = run_dir / "results.jsonl"
    metrics_path = run_dir / "metrics.csv"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    # Persist resolved config early
    write_yaml(cfg.raw, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(cfg.seed)

    # (variant, dataset) pairs to skip after a timeout/error
    skip: Dict[Tuple[str, str], bool] = {}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {cfg.experiment_name}")
    _console.print(f"[bold]Variants:[/bold] {', '.join(v.name for v in cfg.variants)}")
    _console.print(f"[bold]Datasets:[/bold] {', '.join(d.label for d in cfg.datasets)}")
    _console.print()

    for ds in cfg.datasets:
        for n in tqdm(sizes, desc=ds.label, unit="n"):
            base_a = make_dataset(int(n), ds.spec, rng)

            for variant in cfg.variants:
                key = (variant.name, ds.label)
                if skip.get(key):
                    continue

                data_type = f"{ds.label}_{variant.config.label}"
                res = measure_sort_call(
                    variant=variant.name,
                    config=variant.config,
                    a=base_a,
                    data_type=data_type,
                    repeats=cfg.repeats,
                    warmup=cfg.warmup,
                    disable_gc=cfg.disable_gc,
                    timeout_seconds=cfg.timeout_seconds,
                )

                for trial_idx, record in enumerate(res["samples"]):
                    _append_jsonl(
                        {
                            "variant": variant.name,
                            "dataset": ds.label,
                            "n": int(n),
                            "trial": trial_idx,
                            "optimize": variant.config.use_binary_search,
                            "sorted_ok": res["sorted_ok"],
                            **record,
                        },
                        results_path,
                    )
                append_records(metrics_path, res["samples"])

                status = res["status"]
                if status != "ok":
                    skip[key] = True
                    _append_jsonl(
                        {
                            "variant": variant.name,
                            "dataset": ds.label,
                            "n": int(n),
                            "status": status,
                            "timed_out_on_repeat": res["timed_out_on_repeat"],
                            "error": res["error"],
                        },
                        results_path,
                    )
                    _LOGGER.info("Skipping larger sizes for %s on %s (%s)", variant.name, ds.label, status)

                if res["sorted_ok"] is False:
                    _console.print(
                        f"[bold red]{variant.name} produced unsorted output on {ds.label} n={n}[/]"
                    )

    summary_df = aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)

    _print_rich_summary(summary_df, sizes)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    for p in (results_path, metrics_path, summary_path, meta_path, cfg_resolved_path):
        _console.print(f" - {p}")

    return run_dir

