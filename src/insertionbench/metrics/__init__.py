"""
Metrics package public API.

Re-exports:
    MetricsCollector
    CSV_HEADER, CSV_COLUMNS, append_record, append_records
"""

from .collector import MetricsCollector
from .export import CSV_COLUMNS, CSV_HEADER, append_record, append_records

__all__ = [
    "MetricsCollector",
    "CSV_COLUMNS",
    "CSV_HEADER",
    "append_record",
    "append_records",
]
