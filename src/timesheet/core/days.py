"""Build the category entries for a single report day - pure, no I/O."""

from datetime import date, datetime
from typing import Callable

from .categories import INDUCTION_PREFIX, CategoryEntry, CategoryKind, TaskMetadata, classify
from .intervals import TrackedInterval, full_day, subset

TaskResolver = Callable[[str], TaskMetadata | None]


def build_entries(
    day: date | datetime,
    tracked: list[TrackedInterval],
    as_of: datetime | None = None,
    induction_prefix: str = INDUCTION_PREFIX,
    task_urls: dict[str, str] | None = None,
    resolve_task: TaskResolver | None = None,
) -> list[CategoryEntry]:
    """
    Classify the intervals overlapping `day` into category entries.

    An interval carrying tags of two categories is attached to both, with its
    full duration in each. Open intervals are left out of days after `as_of`,
    and empty intervals are dropped. Entries come back in order of first
    encounter.

    With `resolve_task`, each task id is looked up and the tags its tracker
    knows are classified too: a task tagged "guild" in the tracker puts every
    interval carrying that id under Guild as well. Fetched tags never appear
    in tag-group labels.
    """
    as_of = as_of or datetime.now()
    day_start, day_end = full_day(day)

    entries: dict[str, CategoryEntry] = {}

    def attach(category, track: TrackedInterval) -> CategoryEntry:
        entry = entries.get(category.key)
        if entry is None:
            entry = CategoryEntry.for_category(
                category,
                induction_prefix=induction_prefix,
                task_urls=task_urls,
            )
            entries[category.key] = entry
        entry.add_track_tags(track.tags, track)
        return entry

    for track in subset(tracked, day_start, day_end):
        # Running intervals only belong to days up to now
        if track.is_open() and day_start > as_of:
            continue
        if track.is_empty():
            continue

        attached: set[str] = set()
        fetched: list[str] = []
        for tag in track.tags:
            category = classify(tag, induction_prefix)
            if category is None or category.key in attached:
                continue

            entry = attach(category, track)
            attached.add(category.key)

            if resolve_task is not None and category.kind is CategoryKind.TASK:
                entry.metadata = resolve_task(category.key)
                if entry.metadata is not None:
                    fetched.extend(entry.metadata.tags)

        for tag in fetched:
            category = classify(tag, induction_prefix)
            if category is None or category.key in attached:
                continue
            attach(category, track)
            attached.add(category.key)

    return list(entries.values())
