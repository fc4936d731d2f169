"""Configuration management for cadence."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.events import DEFAULT_TIMEZONE
from .core.expansion import DEFAULT_MAX_OCCURRENCES

logger = logging.getLogger(__name__)

CADENCE_HOME = Path(os.environ.get("CADENCE_HOME", Path.home() / "cadence"))
CONFIG_FILE = CADENCE_HOME / "config" / "cadence.conf"
DATA_DIR = CADENCE_HOME / "data"


@dataclass
class Config:
    """cadence configuration."""

    events_file: str = ""
    # Used for events stored without a zone
    default_timezone: str = DEFAULT_TIMEZONE
    # Zone the month view buckets occurrences by
    display_timezone: str = DEFAULT_TIMEZONE
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES
    upcoming_days: int = 14
    upcoming_limit: int = 200
    running_limit: int = 3

    @property
    def events_path(self) -> Path:
        if self.events_file:
            return Path(self.events_file).expanduser()
        return DATA_DIR / "events.json"


_INT_KEYS = {"max_occurrences", "upcoming_days", "upcoming_limit", "running_limit"}


def _strip_value(value: str) -> str:
    """Unquote a value, or drop an inline comment from an unquoted one."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from cadence.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        if key in _INT_KEYS:
            try:
                setattr(config, key, int(value))
            except ValueError:
                logger.warning(f"Ignoring non-integer {key.upper()}: {value!r}")
            continue

        match key:
            case "events_file":
                config.events_file = value
            case "default_timezone":
                config.default_timezone = value
            case "display_timezone":
                config.display_timezone = value
            case _:
                logger.debug(f"Unknown config key: {key}")

    return config
