"""Tracked interval model - pure, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class TrackedInterval:
    """A recorded span of time with free-form tags.

    `end` is None while the interval is still running.
    """

    id: int
    start: datetime
    end: datetime | None
    tags: tuple[str, ...] = ()

    def __post_init__(self):
        # Timewarrior keeps tags in an ordered set
        object.__setattr__(self, "tags", tuple(sorted(set(self.tags))))

    def is_open(self) -> bool:
        return self.end is None

    def duration(self, as_of: datetime | None = None) -> timedelta:
        """Elapsed time, measured against `as_of` while still open."""
        end = self.end if self.end is not None else (as_of or datetime.now())
        return end - self.start

    def is_empty(self) -> bool:
        """Closed and zero length."""
        return self.end is not None and self.end == self.start

    def intersects(self, range_start: datetime, range_end: datetime) -> bool:
        if self.start >= range_end:
            return False
        if self.end is None:
            return True
        if self.end == self.start:
            return range_start <= self.start
        return self.end > range_start


def full_day(day: date | datetime) -> tuple[datetime, datetime]:
    """Return [start-of-day, start-of-next-day) for a calendar day."""
    if isinstance(day, datetime):
        day = day.date()
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def subset(
    intervals: list[TrackedInterval],
    range_start: datetime,
    range_end: datetime,
) -> list[TrackedInterval]:
    """Intervals intersecting the range, in input order."""
    return [i for i in intervals if i.intersects(range_start, range_end)]
