"""Day-by-day aggregation and row assembly for the timesheet report - pure, no I/O."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterator

from .categories import INDUCTION_PREFIX, CategoryEntry, sort_entries
from .days import TaskResolver, build_entries
from .intervals import TrackedInterval

_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass
class DayReport:
    """The classified entries of one day, with their durations summed."""

    day: date
    entries: list[CategoryEntry]
    group_totals: dict[tuple[str, str], timedelta] = field(default_factory=dict)
    entry_totals: dict[str, timedelta] = field(default_factory=dict)
    total: timedelta = timedelta(0)

    def group_total(self, entry: CategoryEntry, label: str) -> timedelta:
        return self.group_totals[(entry.category(), label)]


@dataclass
class ReportRow:
    """One rendered table row. Empty strings are blank cells."""

    week: str = ""
    date: str = ""
    day: str = ""
    category: str = ""
    tags: str = ""
    uri: str = ""
    ids: str = ""
    time: str = ""
    total: str = ""
    title: str = ""
    underline: bool = False


COLUMNS = [
    ("week", "Wk"),
    ("date", "Date"),
    ("day", "Day"),
    ("category", "Category"),
    ("tags", "Tags"),
    ("uri", "Phabricator"),
    ("ids", "IDs"),
    ("title", "Title"),
    ("time", "Time"),
    ("total", "Total"),
]


def format_hours(duration: timedelta) -> str:
    """Format a duration as H:MM:SS, hours unbounded."""
    seconds = int(duration.total_seconds())
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def _to_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def iter_days(start: date | datetime, end: date | datetime) -> Iterator[date]:
    """Calendar days from start's day up to, but excluding, end."""
    end_dt = _to_datetime(end)
    day = _to_datetime(start).date()
    while datetime.combine(day, time.min) < end_dt:
        yield day
        day += timedelta(days=1)


def summarize_day(
    day: date,
    entries: list[CategoryEntry],
    as_of: datetime | None = None,
) -> DayReport:
    """Sum durations per tag-group, per entry and for the whole day."""
    as_of = as_of or datetime.now()
    report = DayReport(day=day, entries=entries)

    for entry in entries:
        entry_total = timedelta(0)
        for label, tracks in entry.groups():
            group_total = sum((t.duration(as_of) for t in tracks), timedelta(0))
            report.group_totals[(entry.category(), label)] = group_total
            entry_total += group_total
        report.entry_totals[entry.category()] = entry_total
        report.total += entry_total

    return report


def aggregate_days(
    tracked: list[TrackedInterval],
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    as_of: datetime | None = None,
    induction_prefix: str = INDUCTION_PREFIX,
    task_urls: dict[str, str] | None = None,
    sort: bool = False,
    resolve_task: TaskResolver | None = None,
) -> tuple[list[DayReport], timedelta]:
    """
    Build and sum category entries for every day of the range.

    Without `start` the range begins on the earliest tracked day; without
    `end` it runs up to `as_of`. Days with no entries are skipped.
    `resolve_task` is handed to build_entries for task metadata lookup.

    Returns (day reports, grand total).
    """
    as_of = as_of or datetime.now()
    if not tracked:
        return [], timedelta(0)

    days_start = start if start is not None else min(t.start for t in tracked)
    days_end = end if end is not None else as_of

    days = []
    grand_total = timedelta(0)
    for day in iter_days(days_start, days_end):
        entries = build_entries(day, tracked, as_of, induction_prefix, task_urls, resolve_task)
        if not entries:
            continue
        if sort:
            entries = sort_entries(entries)

        report = summarize_day(day, entries, as_of)
        days.append(report)
        grand_total += report.total

    return days, grand_total


def assemble_rows(
    days: list[DayReport],
    grand_total: timedelta,
    formatter: Callable[[timedelta], str] = format_hours,
    style_id: Callable[[str], str] | None = None,
) -> list[ReportRow]:
    """
    Project aggregated days into table rows.

    The first row of a day carries week, date and day name; the first row of
    an entry carries its category, link and title. Each day ends with a
    day-total row, and the report ends with an underlined separator and the
    grand total.
    """
    rows: list[ReportRow] = []
    previous: date | None = None

    for report in days:
        first_row = len(rows)

        for entry in report.entries:
            for index, (label, tracks) in enumerate(entry.groups()):
                ids = [f"@{t.id}" for t in tracks]
                if style_id:
                    ids = [style_id(i) for i in ids]

                row = ReportRow(
                    tags=label,
                    ids=", ".join(ids),
                    time=formatter(report.group_total(entry, label)),
                )
                if index == 0:
                    row.category = entry.pretty_id()
                    row.uri = entry.uri()
                    row.title = entry.title()
                rows.append(row)

        if report.day != previous and len(rows) > first_row:
            header = rows[first_row]
            header.week = f"W{report.day.isocalendar()[1]}"
            header.date = report.day.isoformat()
            header.day = _DAY_NAMES[report.day.weekday()]
            previous = report.day

        rows.append(ReportRow(total=formatter(report.total)))

    rows.append(ReportRow(total=" ", underline=True))
    rows.append(ReportRow(total=formatter(grand_total)))
    return rows


def build_report(
    tracked: list[TrackedInterval],
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    as_of: datetime | None = None,
    induction_prefix: str = INDUCTION_PREFIX,
    task_urls: dict[str, str] | None = None,
    sort: bool = False,
    style_id: Callable[[str], str] | None = None,
) -> list[ReportRow]:
    """
    Aggregate and assemble in one go.

    An empty interval collection yields no rows at all.
    """
    if not tracked:
        return []
    days, grand_total = aggregate_days(
        tracked, start, end, as_of, induction_prefix, task_urls, sort
    )
    return assemble_rows(days, grand_total, style_id=style_id)
