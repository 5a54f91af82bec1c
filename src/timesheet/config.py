"""Configuration management for timesheet."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.categories import DEFAULT_TASK_URLS, INDUCTION_PREFIX

logger = logging.getLogger(__name__)

TIMESHEET_HOME = Path(os.environ.get("TIMESHEET_HOME", Path.home() / ".timesheet"))
CONFIG_FILE = TIMESHEET_HOME / "config" / "timesheet.conf"


@dataclass
class Config:
    """Timesheet configuration."""

    color: bool = False
    id_color: str = "blue"
    induction_prefix: str = INDUCTION_PREFIX
    sort_entries: bool = False
    collabora_task_url: str = DEFAULT_TASK_URLS["t"]
    apertis_task_url: str = DEFAULT_TASK_URLS["at"]
    metadata_file: str = ""

    @property
    def task_urls(self) -> dict[str, str]:
        """Task id prefix to URL template."""
        return {"t": self.collabora_task_url, "at": self.apertis_task_url}


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lower = value.lower()
    if lower in {"1", "true", "yes", "on"}:
        return True
    if lower in {"0", "false", "no", "off"}:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}, keeping {default}")
    return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from timesheet.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value.startswith('"') or value.startswith("'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "color":
                config.color = _parse_bool(key, value, config.color)
            case "id_color":
                config.id_color = value
            case "induction_prefix":
                if value:
                    config.induction_prefix = value.lower()
                else:
                    logger.warning("Empty INDUCTION_PREFIX ignored")
            case "sort_entries":
                config.sort_entries = _parse_bool(key, value, config.sort_entries)
            case "collabora_task_url":
                config.collabora_task_url = value
            case "apertis_task_url":
                config.apertis_task_url = value
            case "metadata_file":
                config.metadata_file = value
            case _:
                logger.debug(f"Unknown config key {key.upper()}")

    for template in (config.collabora_task_url, config.apertis_task_url):
        if template and "{id}" not in template:
            logger.warning(f"Task URL template has no {{id}} placeholder: {template}")

    return config
