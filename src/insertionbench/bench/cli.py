"""
Command-line entry point.

    insertionbench run CONFIG.yaml
    insertionbench single --size 10000 --data-type random --optimize
    insertionbench compare --size 5000 --data-type nearly_sorted
    insertionbench comprehensive --sizes 100 1000 10000
    insertionbench quick

`single`, `compare` and `comprehensive` append one line per sort to a metrics
CSV (default benchmark_results.csv) labelled "<data type>_opt" or
"<data type>_std", where <data type> is the name as given on the command
line (lowercased), so "reverse" and "reversed" stay distinguishable in the CSV.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.table import Table

from insertionbench.algorithms import InsertionSorter, is_sorted
from insertionbench.bench.runner import run_experiment
from insertionbench.datasets import SUPPORTED_DISTS, make_dataset, normalize_dist

_LOGGER = logging.getLogger(__name__)
_console = Console()

DEFAULT_CSV = "benchmark_results.csv"
DEFAULT_SIZES = [100, 1000, 10000]
DEFAULT_SEED = 42
# Fixed order for the comprehensive sweep.
DATA_TYPES = ["random", "sorted", "reversed", "nearly_sorted", "duplicates"]

__all__ = ["build_parser", "run_single", "main"]


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, rich_tracebacks=True)],
    )


def run_single(
    size: int,
    data_type: str,
    use_optimization: bool,
    *,
    rng: np.random.Generator,
    csv_path: Optional[Path] = None,
) -> InsertionSorter:
    """Generate one input, sort it, print the metrics and optionally append them to CSV."""
    label = data_type.strip().lower()
    dist = normalize_dist(label)
    arr = make_dataset(size, dist, rng)

    sorter = InsertionSorter(use_optimization)
    sorter.sort(arr)

    _console.print(Rule(f"Benchmark Results - {dist} data (n={size:,})"))
    _console.print(f"Optimization: {'ENABLED' if use_optimization else 'DISABLED'}")
    _console.print(str(sorter.metrics))
    _console.print(f"Sorted correctly: {is_sorted(arr)}")

    if csv_path is not None:
        try:
            sorter.metrics.export_csv(csv_path, size, f"{label}_{sorter.config.label}")
        except OSError as e:
            _LOGGER.error("Failed to export CSV to %s: %s", csv_path, e)
        else:
            _console.print(f"Results exported to: {csv_path}")
    return sorter


def _cmd_run(args: argparse.Namespace) -> None:
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    run_experiment(config_path)


def _cmd_single(args: argparse.Namespace) -> None:
    rng = np.random.default_rng(args.seed)
    run_single(args.size, args.data_type, args.optimize, rng=rng, csv_path=args.csv)


def _cmd_compare(args: argparse.Namespace) -> None:
    # Same seed for both so they sort the same input.
    std = run_single(
        args.size, args.data_type, False, rng=np.random.default_rng(args.seed), csv_path=args.csv
    )
    opt = run_single(
        args.size, args.data_type, True, rng=np.random.default_rng(args.seed), csv_path=args.csv
    )

    table = Table(title=f"Optimization impact ({args.data_type}, n={args.size:,})")
    table.add_column("Metric", style="bold")
    table.add_column("Standard", justify="right")
    table.add_column("Binary search", justify="right")
    for label, attr in [
        ("Comparisons", "comparisons"),
        ("Swaps", "swaps"),
        ("Array accesses", "array_accesses"),
    ]:
        table.add_row(label, f"{getattr(std.metrics, attr):,}", f"{getattr(opt.metrics, attr):,}")
    table.add_row("Time (ms)", f"{std.metrics.elapsed_ms:.3f}", f"{opt.metrics.elapsed_ms:.3f}")
    _console.print(table)


def _cmd_comprehensive(args: argparse.Namespace) -> None:
    rng = np.random.default_rng(args.seed)
    _console.print(Rule("COMPREHENSIVE BENCHMARK SUITE"))
    for size in args.sizes:
        for data_type in DATA_TYPES:
            for use_opt in (False, True):
                run_single(size, data_type, use_opt, rng=rng, csv_path=args.csv)
    _console.print(Rule("BENCHMARK SUITE COMPLETED"))


def _cmd_quick(args: argparse.Namespace) -> None:
    arr = make_dataset(20, "random", np.random.default_rng(args.seed))
    _console.print(f"Original: {arr}")
    sorter = InsertionSorter(True)
    sorter.sort(arr)
    _console.print(f"Sorted: {arr}")
    _console.print(str(sorter.metrics))


def _nonnegative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a nonnegative integer; got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="insertionbench",
        description="Benchmark instrumented insertion sort (standard vs binary search).",
    )
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a YAML-configured experiment")
    run.add_argument("config", type=str, help="Path to YAML experiment config")
    run.set_defaults(func=_cmd_run)

    def _add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--seed", type=int, default=DEFAULT_SEED, help="RNG seed")
        sp.add_argument("--csv", type=Path, default=Path(DEFAULT_CSV), help="Metrics CSV to append to")

    data_help = f"Input distribution: {', '.join(sorted(SUPPORTED_DISTS))}"

    single = sub.add_parser("single", help="Run one benchmark")
    single.add_argument("--size", type=_nonnegative_int, required=True)
    single.add_argument("--data-type", required=True, help=data_help)
    single.add_argument("--optimize", action="store_true", help="Use the binary-search variant")
    _add_common(single)
    single.set_defaults(func=_cmd_single)

    compare = sub.add_parser("compare", help="Compare standard and binary-search variants")
    compare.add_argument("--size", type=_nonnegative_int, required=True)
    compare.add_argument("--data-type", required=True, help=data_help)
    _add_common(compare)
    compare.set_defaults(func=_cmd_compare)

    comp = sub.add_parser("comprehensive", help="Every data type x both variants")
    comp.add_argument("--sizes", type=_nonnegative_int, nargs="+", default=DEFAULT_SIZES)
    _add_common(comp)
    comp.set_defaults(func=_cmd_comprehensive)

    quick = sub.add_parser("quick", help="Sort a small random array and show the metrics")
    quick.add_argument("--seed", type=int, default=DEFAULT_SEED, help="RNG seed")
    quick.set_defaults(func=_cmd_quick)

    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    _setup_logging(args.log_level)
    try:
        args.func(args)
    except ValueError as e:
        _console.print(f"[bold red]Invalid arguments:[/bold red] {e}")
        raise SystemExit(2) from e
    except Exception as e:
        _console.print(f"[bold red]Benchmark failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
