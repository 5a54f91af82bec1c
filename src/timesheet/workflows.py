"""Workflow layer between the CLI and the functional core.

Wires configuration, metadata lookup and report generation together.
"""

import logging
from datetime import date, datetime
from typing import Callable

from .adapters.json_metadata import JsonTaskMetadataStore
from .config import Config
from .core.categories import TaskMetadata
from .core.intervals import TrackedInterval
from .core.report import ReportRow, aggregate_days, assemble_rows
from .ports.task_metadata import FetchError, TaskMetadataFetcher

logger = logging.getLogger(__name__)


def get_metadata_fetcher(config: Config, metadata_file: str | None = None) -> TaskMetadataFetcher | None:
    """Resolve the task metadata source, if any is configured."""
    path = metadata_file or config.metadata_file
    if not path:
        return None
    return JsonTaskMetadataStore(path)


def task_resolver(
    fetcher: TaskMetadataFetcher,
    cache: dict[str, TaskMetadata | None] | None = None,
) -> Callable[[str], TaskMetadata | None]:
    """
    Wrap a fetcher for use while entries are built.

    Each task id is fetched at most once per cache. Failures are logged and
    remembered as misses, so the entry renders with its bare id.
    """
    cache = {} if cache is None else cache

    def resolve(task_id: str) -> TaskMetadata | None:
        if task_id not in cache:
            try:
                cache[task_id] = fetcher.fetch(task_id)
            except FetchError as e:
                logger.warning(f"Failed to fetch metadata for {task_id}: {e}")
                cache[task_id] = None
        return cache[task_id]

    return resolve


def generate_timesheet(
    intervals: list[TrackedInterval],
    config: Config,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    as_of: datetime | None = None,
    fetcher: TaskMetadataFetcher | None = None,
    style_id: Callable[[str], str] | None = None,
) -> list[ReportRow]:
    """Classify, aggregate and assemble the timesheet rows for a range."""
    if not intervals:
        logger.info("No tracked intervals, nothing to report")
        return []

    days, grand_total = aggregate_days(
        intervals,
        start=start,
        end=end,
        as_of=as_of,
        induction_prefix=config.induction_prefix,
        task_urls=config.task_urls,
        sort=config.sort_entries,
        resolve_task=task_resolver(fetcher) if fetcher is not None else None,
    )
    logger.debug(f"Aggregated {len(days)} days from {len(intervals)} intervals")

    return assemble_rows(days, grand_total, style_id=style_id)
