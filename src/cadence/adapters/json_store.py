"""JSON file event storage adapter."""

import json
import logging
from pathlib import Path

from cadence.core.events import DEFAULT_TIMEZONE, EventDefinition, parse_event

logger = logging.getLogger(__name__)


class EventStoreError(Exception):
    """The events file exists but can't be read."""


class JsonEventStore:
    """
    Read-only event storage backed by a JSON file.

    Implements EventRepository protocol. The file holds either a list of
    event records or an object with an "items" list, in the same shape the
    events API returns them.
    """

    def __init__(self, path: Path | str, default_timezone: str = DEFAULT_TIMEZONE):
        self.path = Path(path).expanduser()
        self.default_timezone = default_timezone

    def _load_records(self) -> list:
        if not self.path.exists():
            logger.debug(f"No events file at {self.path}")
            return []
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise EventStoreError(f"Failed to read {self.path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("items", [])
        if not isinstance(data, list):
            raise EventStoreError(f"Expected a list of events in {self.path}")
        return data

    def fetch_all(self) -> list[EventDefinition]:
        """Fetch every event definition, skipping records that don't parse."""
        events = []
        for i, record in enumerate(self._load_records()):
            if not isinstance(record, dict):
                logger.warning(f"Skipping event record #{i}: not an object")
                continue
            try:
                events.append(parse_event(record, self.default_timezone))
            except ValueError as e:
                logger.warning(f"Skipping event record #{i} ({record.get('id', '<no-id>')}): {e}")
        return events

    def fetch(self, event_id: str) -> EventDefinition | None:
        """Fetch one event definition. Returns None if not found."""
        for event in self.fetch_all():
            if event.id == event_id:
                return event
        return None
