"""Ports - interfaces/protocols for external dependencies."""

from .task_metadata import FetchError, TaskMetadataFetcher

__all__ = [
    "FetchError",
    "TaskMetadataFetcher",
]
