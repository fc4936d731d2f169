"""Event repository interface."""

from typing import Protocol

from cadence.core.events import EventDefinition


class EventRepository(Protocol):
    """Interface for fetching event definitions from any backend."""

    def fetch_all(self) -> list[EventDefinition]:
        """Fetch every stored event definition."""
        ...

    def fetch(self, event_id: str) -> EventDefinition | None:
        """Fetch one event definition. Returns None if not found."""
        ...
