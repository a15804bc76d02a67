"""
CSV export for metrics records.

One record per line, appended to a comma-separated file. The header line is
written only when the target file does not exist yet or is empty, so several
runs (or several processes run one after another) can share one file.

Column order (stable; downstream spreadsheets depend on it):
    ArraySize,DataType,Comparisons,Swaps,ArrayAccesses,MemoryAllocations,TimeNanos,TimeMillis

TimeMillis is written with six decimals.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Union

import pandas as pd

# record key -> CSV column
CSV_COLUMNS: Dict[str, str] = {
    "array_size": "ArraySize",
    "data_type": "DataType",
    "comparisons": "Comparisons",
    "swaps": "Swaps",
    "array_accesses": "ArrayAccesses",
    "memory_allocations": "MemoryAllocations",
    "time_nanos": "TimeNanos",
    "time_millis": "TimeMillis",
}
CSV_HEADER = ",".join(CSV_COLUMNS.values())

__all__ = ["CSV_COLUMNS", "CSV_HEADER", "append_record", "append_records"]


def _needs_header(path: Path) -> bool:
    return not path.exists() or path.stat().st_size == 0


def append_records(
    path: Union[str, Path], records: Iterable[Mapping[str, Any]]
) -> Path:
    """
    Append metrics records to `path`, writing the header only for a new/empty file.

    Parameters
    ----------
    path : str | Path
        Target CSV file. Parent directories must exist.
    records : iterable of dict
        Records shaped like `MetricsCollector.to_record(...)`.

    Returns
    -------
    Path
        The path written to.
    """
    path = Path(path)
    rows = list(records)
    if not rows:
        return path
    missing = [k for row in rows for k in CSV_COLUMNS if k not in row]
    if missing:
        raise ValueError(f"metrics record is missing fields: {sorted(set(missing))}")

    df = pd.DataFrame(rows, columns=list(CSV_COLUMNS)).rename(columns=CSV_COLUMNS)
    df.to_csv(
        path,
        mode="a",
        header=_needs_header(path),
        index=False,
        float_format="%.6f",
        lineterminator="\n",
    )
    return path


def append_record(path: Union[str, Path], record: Mapping[str, Any]) -> Path:
    return append_records(path, [record])
