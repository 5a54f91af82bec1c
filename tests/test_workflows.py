"""Tests for the workflow layer."""

import logging
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from timesheet.adapters.json_metadata import JsonTaskMetadataStore
from timesheet.config import Config
from timesheet.core.categories import TaskMetadata
from timesheet.core.intervals import TrackedInterval
from timesheet.ports.task_metadata import FetchError
from timesheet.workflows import generate_timesheet, get_metadata_fetcher, task_resolver


@pytest.fixture
def as_of():
    return datetime(2025, 1, 16, 18, 0)


@pytest.fixture
def tracked():
    return [
        TrackedInterval(3, datetime(2025, 1, 15, 9), datetime(2025, 1, 15, 10), ("t123",)),
        TrackedInterval(2, datetime(2025, 1, 15, 10), datetime(2025, 1, 15, 11), ("standup",)),
        TrackedInterval(1, datetime(2025, 1, 16, 9), datetime(2025, 1, 16, 10), ("t123",)),
    ]


class TestGetMetadataFetcher:
    def test_none_without_file(self):
        assert get_metadata_fetcher(Config()) is None

    def test_uses_configured_file(self, tmp_path):
        fetcher = get_metadata_fetcher(Config(metadata_file=str(tmp_path / "tasks.json")))
        assert isinstance(fetcher, JsonTaskMetadataStore)
        assert fetcher.path == tmp_path / "tasks.json"

    def test_explicit_file_wins(self, tmp_path):
        fetcher = get_metadata_fetcher(Config(metadata_file="a.json"), str(tmp_path / "b.json"))
        assert fetcher.path == tmp_path / "b.json"


class TestTaskResolver:
    def test_returns_fetched_metadata(self):
        fetcher = MagicMock()
        fetcher.fetch.return_value = TaskMetadata(title="Fix login")

        resolve = task_resolver(fetcher)

        assert resolve("t123") == TaskMetadata(title="Fix login")
        fetcher.fetch.assert_called_once_with("t123")

    def test_cache_avoids_refetch(self):
        fetcher = MagicMock()
        fetcher.fetch.return_value = TaskMetadata(title="Fix login")
        cache = {}

        resolve = task_resolver(fetcher, cache)
        resolve("t123")
        resolve("t123")

        assert fetcher.fetch.call_count == 1
        assert cache == {"t123": TaskMetadata(title="Fix login")}

    def test_failure_is_logged_and_remembered(self, caplog):
        fetcher = MagicMock()
        fetcher.fetch.side_effect = FetchError("tracker unavailable")
        cache = {}

        with caplog.at_level(logging.WARNING, logger="timesheet.workflows"):
            assert task_resolver(fetcher, cache)("t123") is None
            assert task_resolver(fetcher, cache)("t123") is None

        assert fetcher.fetch.call_count == 1
        assert cache == {"t123": None}
        assert "tracker unavailable" in caplog.text


class TestGenerateTimesheet:
    def test_empty_collection(self, as_of):
        assert generate_timesheet([], Config(), as_of=as_of) == []

    def test_rows_use_config(self, tracked, as_of):
        config = Config(collabora_task_url="https://tracker.example/T{id}", sort_entries=True)

        rows = generate_timesheet(tracked, config, as_of=as_of)

        assert [r.category for r in rows[:2]] == ["Standup", "T123"]
        assert rows[1].uri == "https://tracker.example/T123"
        assert rows[-1].total == "3:00:00"

    def test_fetch_failure_still_renders(self, tracked, as_of):
        fetcher = MagicMock()
        fetcher.fetch.side_effect = FetchError("boom")

        rows = generate_timesheet(tracked, Config(), as_of=as_of, fetcher=fetcher)

        assert rows[0].category == "T123"
        assert rows[0].title == ""
        assert rows[-1].total == "3:00:00"

    def test_titles_fetched_once_per_report(self, tracked, as_of):
        fetcher = MagicMock()
        fetcher.fetch.return_value = TaskMetadata(title="Fix login")

        rows = generate_timesheet(tracked, Config(), as_of=as_of, fetcher=fetcher)

        assert fetcher.fetch.call_count == 1
        assert [r.title for r in rows if r.category == "T123"] == ["Fix login", "Fix login"]

    def test_induction_prefix_from_config(self, as_of):
        tracked = [TrackedInterval(1, datetime(2025, 1, 15, 9), datetime(2025, 1, 15, 10), ("induction",))]

        assert generate_timesheet(tracked, Config(), as_of=as_of)[0].category == "Induction"
        rows = generate_timesheet(tracked, Config(induction_prefix="guild"), as_of=as_of)
        assert rows[-1].total == "0:00:00"

    def test_fetched_tags_classify_later_intervals(self, tracked, as_of):
        fetcher = MagicMock()
        fetcher.fetch.return_value = TaskMetadata(title="Fix login", tags=("guild",))

        rows = generate_timesheet(tracked, Config(), as_of=as_of, fetcher=fetcher)

        assert [r.category for r in rows if r.category] == ["T123", "Guild", "Standup", "T123", "Guild"]
        assert [r.tags for r in rows if r.category == "Guild"] == ["T123", "T123"]
        assert rows[-1].total == "5:00:00"
        assert fetcher.fetch.call_count == 1
