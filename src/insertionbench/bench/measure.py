"""
Measurement harness for the instrumented insertion sort.

Each sample is exactly one `InsertionSorter.sort` call on a fresh copy of the
input. The sorter's own collector does the timing (perf_counter_ns inside
`sort`), so copying, GC and warmup all happen outside the measured region.

Public API (stable):
    measure_sort_call(...) -> dict

Returned dict schema:
    {
        "variant": str,
        "repeats": int,
        "samples": list[dict],              # MetricsCollector.to_record(...) per sample
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # populated if status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
        "sorted_ok": bool | None,           # output check of the last sample
    }
"""

from __future__ import annotations

import gc
import logging
from typing import Any, Dict, List, Optional

from insertionbench.algorithms import InsertionSorter, SortConfig
from insertionbench.validate import check_sort_output

_LOGGER = logging.getLogger(__name__)

__all__ = ["measure_sort_call"]


def measure_sort_call(
    *,
    variant: str,
    config: SortConfig,
    a: List[int],
    data_type: str,
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
    validate: bool = True,
) -> Dict[str, Any]:
    """
    Run `repeats` instrumented sorts of `a` and collect one metrics record each.

    Parameters
    ----------
    variant : str
        Logical variant name (for logs/records).
    config : SortConfig
        Sorter configuration; one sorter is built and reused for every sample.
    a : list[int]
        Input array. Never mutated; each sample sorts its own copy.
    data_type : str
        Label stored in each record's "data_type" field.
    repeats : int
        Number of measured samples to collect.
    warmup : bool
        If True, make one unmeasured sort before sampling.
    disable_gc : bool
        If True, collect and disable Python GC during sampling; restore afterward.
    timeout_seconds : float
        Per-sample threshold. A sample above it sets status="timeout" and
        stops further sampling.
    validate : bool
        If True, check the last sample's output against the oracle.

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    result: Dict[str, Any] = {
        "variant": variant,
        "repeats": repeats,
        "samples": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
        "sorted_ok": None,
    }
    sorter = InsertionSorter.from_config(config)
    last_out: Optional[List[int]] = None

    # ---- Warmup (outside GC disable) ----
    if warmup and repeats > 0:
        try:
            sorter.sort(list(a))
        except Exception as e:  # pragma: no cover
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            _LOGGER.warning("Warmup failed for %s: %r", variant, e)
            return result

    # ---- GC control ----
    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            try:
                arg = list(a)
                sorter.sort(arg)
                record = sorter.metrics.to_record(len(a), data_type)
                result["samples"].append(record)
                last_out = arg

                if record["time_nanos"] > threshold_ns:
                    result["status"] = "timeout"
                    result["timed_out_on_repeat"] = r
                    _LOGGER.info(
                        "%s timed out at n=%d (%.1f ms)", variant, len(a), record["time_millis"]
                    )
                    break

            except Exception as e:  # pragma: no cover
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                _LOGGER.warning("Sort failed for %s at repeat %d: %r", variant, r, e)
                break

    finally:
        # Leave GC disabled if the caller had it disabled.
        if disable_gc and prev_gc_enabled:
            gc.enable()

    if validate and last_out is not None:
        problems = check_sort_output(a, last_out)
        result["sorted_ok"] = not problems
        if problems:
            _LOGGER.error("%s produced bad output at n=%d: %s", variant, len(a), problems)

    return result
