"""File-based task metadata adapter."""

import json
from pathlib import Path

from timesheet.core.categories import TaskMetadata
from timesheet.ports.task_metadata import FetchError


class JsonTaskMetadataStore:
    """
    Task metadata read from a local JSON file.

    Implements TaskMetadataFetcher protocol. The file maps task ids to
    objects with "title" and "tags": {"t123": {"title": "...", "tags": [...]}}.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self._data: dict | None = None

    def _load(self) -> dict:
        if self._data is None:
            try:
                data = json.loads(self.path.read_text())
            except (OSError, json.JSONDecodeError) as e:
                raise FetchError(f"Cannot read {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise FetchError(f"{self.path} must contain a JSON object")
            self._data = {str(k).lower(): v for k, v in data.items()}
        return self._data

    def fetch(self, task_id: str) -> TaskMetadata:
        """Look up a task by id. Raises FetchError if unknown."""
        item = self._load().get(task_id.lower())
        if not isinstance(item, dict):
            raise FetchError(f"No metadata for {task_id}")
        return TaskMetadata(
            title=str(item.get("title", "")),
            tags=tuple(str(t) for t in item.get("tags", [])),
        )
