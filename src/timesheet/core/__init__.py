"""Functional core - pure business logic with no I/O."""

from .intervals import TrackedInterval, full_day, subset
from .categories import (
    Category,
    CategoryEntry,
    CategoryKind,
    TaskMetadata,
    classify,
    sort_entries,
    task_uri,
)
from .days import build_entries
from .report import DayReport, ReportRow, aggregate_days, assemble_rows, build_report, format_hours

__all__ = [
    # Intervals
    "TrackedInterval",
    "full_day",
    "subset",
    # Categories
    "Category",
    "CategoryEntry",
    "CategoryKind",
    "TaskMetadata",
    "classify",
    "sort_entries",
    "task_uri",
    # Days
    "build_entries",
    # Report
    "DayReport",
    "ReportRow",
    "aggregate_days",
    "assemble_rows",
    "build_report",
    "format_hours",
]
