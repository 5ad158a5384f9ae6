"""Configuration management for Daybook."""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

from .adapters.file_journal import PROJECT_DIR_NAME, find_git_root

logger = logging.getLogger(__name__)

DAYBOOK_HOME = Path(os.environ.get("DAYBOOK_HOME", Path.home() / ".config" / "daybook"))
CONFIG_FILE_NAME = "daybook.conf"
CONFIG_FILE = DAYBOOK_HOME / CONFIG_FILE_NAME
DEFAULT_JOURNAL = DAYBOOK_HOME / "global_journal.md"

MAP_KEYS = ("favorite_tags", "filters", "calendars")


def _default_favorite_tags() -> dict[str, str]:
    return {"1": "feature", "2": "bug", "3": "idea"}


@dataclass
class Config:
    """Daybook configuration."""

    global_file: str = ""
    favorite_tags: dict[str, str] = field(default_factory=_default_favorite_tags)
    filters: dict[str, str] = field(default_factory=dict)
    default_filter: str = "!tasks"
    header_date_format: str = "%m/%d/%y"
    hide_completed: bool = False
    calendars: dict[str, str] = field(default_factory=dict)

    def get_global_journal_path(self) -> Path:
        """Configured global journal, or the default one under DAYBOOK_HOME."""
        if not self.global_file:
            return DEFAULT_JOURNAL
        path = Path(self.global_file).expanduser()
        return path if path.is_absolute() else Path.cwd() / path


def _unquote(value: str) -> str:
    # Quoted values keep everything inside the quotes: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments. Tags like a:#a have no space before '#'
    if " #" in value:
        value = value.split(" #")[0].strip()
    return value


def _parse_map(key: str, value: str) -> dict[str, str] | None:
    """
    Parse a map value.

    JSON format: {"1": "feature", "2": "bug"}
    Simple format: "1:feature,2:bug"
    Returns None when a JSON value is malformed.
    """
    if value.startswith("{"):
        try:
            data = json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse {key.upper()} JSON: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {key.upper()}: expected a JSON object")
            return None
        return {str(k): str(v) for k, v in data.items()}

    result = {}
    for item in value.split(","):
        item = item.strip()
        if not item or ":" not in item:
            continue
        name, _, mapped = item.partition(":")
        result[name.strip()] = mapped.strip()
    return result


def _parse_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def read_conf(path: Path) -> dict:
    """
    Read a daybook.conf file into a dict holding only the keys it sets.

    Map values are parsed; malformed ones are left out.
    """
    values: dict = {}
    if not path.exists():
        return values

    logger.debug(f"Reading config {path}")
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        # JSON values contain '#' and quotes of their own
        value = value.strip()
        if not value.startswith("{"):
            value = _unquote(value)

        match key:
            case "favorite_tags" | "filters" | "calendars":
                parsed = _parse_map(key, value)
                if parsed is not None:
                    values[key] = parsed
            case "hide_completed":
                values[key] = _parse_bool(value)
            case "global_file" | "default_filter" | "header_date_format":
                values[key] = value
            case _:
                logger.debug(f"Ignoring unknown config key {key}")

    return values


def _build_config(values: dict) -> Config:
    config = Config()
    known = {f.name for f in fields(Config)}
    for key, value in values.items():
        if key in known:
            setattr(config, key, value)
    return config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from daybook.conf. A missing file yields defaults."""
    return _build_config(read_conf(path or CONFIG_FILE))


def project_config_path(start: Path | None = None) -> Path | None:
    """The project config file at the git root, if one exists."""
    root = find_git_root(start)
    if root is None:
        return None
    path = root / PROJECT_DIR_NAME / CONFIG_FILE_NAME
    return path if path.exists() else None


def merge_config_values(base: dict, override: dict) -> dict:
    """
    Layer project values over global ones.

    Map keys are merged with the override winning on collisions; other keys
    are replaced. global_file only ever comes from the base.
    """
    merged = dict(base)
    for key, value in override.items():
        if key == "global_file":
            continue
        if key in MAP_KEYS:
            defaults = getattr(Config(), key)
            merged[key] = {**merged.get(key, defaults), **value}
        else:
            merged[key] = value
    return merged


def load_merged_config(path: Path | None = None, start: Path | None = None) -> Config:
    """Global configuration with the project's daybook.conf layered on top."""
    values = read_conf(path or CONFIG_FILE)
    project_path = project_config_path(start)
    if project_path is not None:
        values = merge_config_values(values, read_conf(project_path))
    return _build_config(values)
