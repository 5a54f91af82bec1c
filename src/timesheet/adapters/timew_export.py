"""Timewarrior adapter - parses `timew export` JSON and extension input."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo

from timesheet.core.intervals import TrackedInterval

logger = logging.getLogger(__name__)

TIMEW_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"


class ExportFormatError(ValueError):
    """Raised when Timewarrior data cannot be parsed."""

    pass


@dataclass
class ExtensionInput:
    """What Timewarrior hands to a report extension on stdin."""

    header: dict[str, str] = field(default_factory=dict)
    intervals: list[TrackedInterval] = field(default_factory=list)
    start: datetime | None = None
    end: datetime | None = None

    @property
    def color(self) -> bool:
        return parse_bool(self.header.get("color")) or False

    @property
    def id_color(self) -> str:
        return self.header.get("theme.colors.ids", "")


def parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lower = value.strip().lower()
    if lower in {"1", "true", "yes", "on", "y"}:
        return True
    if lower in {"0", "false", "no", "off", "n"}:
        return False
    return None


def parse_timestamp(value: str, tz: tzinfo | None = None) -> datetime:
    """Parse a UTC Timewarrior timestamp into a naive datetime in `tz` (local by default)."""
    try:
        utc = datetime.strptime(value, TIMEW_DATETIME_FORMAT).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError) as e:
        raise ExportFormatError(f"Invalid timestamp {value!r}") from e
    return utc.astimezone(tz).replace(tzinfo=None)


def parse_interval(item: dict, tz: tzinfo | None = None) -> TrackedInterval:
    """Create a TrackedInterval from one exported JSON object."""
    try:
        start = parse_timestamp(item["start"], tz)
        end = parse_timestamp(item["end"], tz) if item.get("end") else None
        return TrackedInterval(
            id=int(item["id"]),
            start=start,
            end=end,
            tags=tuple(item.get("tags", [])),
        )
    except ExportFormatError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ExportFormatError(f"Invalid interval {item!r}: {e}") from e


def parse_export(payload: str, tz: tzinfo | None = None) -> list[TrackedInterval]:
    """
    Parse `timew export` output, sorted by start time.

    Older Timewarrior versions omit ids; those are numbered the way `timew`
    does, @1 being the most recent interval.
    """
    if not payload.strip():
        return []
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ExportFormatError(f"Invalid export JSON: {e}") from e
    if not isinstance(data, list):
        raise ExportFormatError("Export JSON must be a list of intervals")

    data = sorted(data, key=lambda item: item.get("start", "") if isinstance(item, dict) else "")
    if any(isinstance(item, dict) and "id" not in item for item in data):
        logger.debug("Export has no interval ids, numbering from the most recent")
        data = [
            {**item, "id": len(data) - index} if isinstance(item, dict) else item
            for index, item in enumerate(data)
        ]

    return [parse_interval(item, tz) for item in data]


def split_extension_input(content: str) -> tuple[dict[str, str], str]:
    """Split the `key: value` header from the JSON payload."""
    if "\n\n" not in content:
        return {}, content

    header_text, payload = content.split("\n\n", 1)
    if not header_text.strip() or header_text.lstrip().startswith("["):
        return {}, content

    header: dict[str, str] = {}
    for line in header_text.splitlines():
        if not line.strip():
            continue
        key, _, value = line.partition(": ")
        if key:
            header[key.strip()] = value.strip()

    return header, payload


def read_extension_input(content: str, tz: tzinfo | None = None) -> ExtensionInput:
    """Parse the full stdin of a Timewarrior report extension."""
    header, payload = split_extension_input(content)

    start = header.get("temp.report.start")
    end = header.get("temp.report.end")

    return ExtensionInput(
        header=header,
        intervals=parse_export(payload, tz),
        start=parse_timestamp(start, tz) if start else None,
        end=parse_timestamp(end, tz) if end else None,
    )
