"""Task metadata interface."""

from typing import Protocol

from timesheet.core.categories import TaskMetadata


class FetchError(Exception):
    """Raised when task metadata cannot be retrieved."""

    pass


class TaskMetadataFetcher(Protocol):
    """Interface for looking up a task's title and tags in its tracker."""

    def fetch(self, task_id: str) -> TaskMetadata:
        """Fetch metadata for a task id such as "t123". Raises FetchError."""
        ...
