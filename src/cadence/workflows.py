"""Shared workflow layer between the CLI and any other front end.

Each function fetches definitions from a repository, expands them with the
pure core, and isolates per-event failures so one bad definition can't sink
a whole listing.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Iterable

from .adapters.json_store import JsonEventStore
from .config import Config
from .core.events import EventDefinition, Occurrence
from .core.expansion import Window, expand_event, expand_event_between
from .core.schedule import (
    clamp,
    group_by_local_date,
    merge_occurrences,
    month_bounds,
    running_now,
    upcoming_window,
)
from .core.wallclock import InvalidTimezone, resolve_zone
from .ports.event_repo import EventRepository

logger = logging.getLogger(__name__)

MAX_UPCOMING_DAYS = 60
MAX_UPCOMING_LIMIT = 1000
MAX_RUNNING_LIMIT = 50


@dataclass
class Expansion:
    """Merged occurrences from a batch, plus the ids of events that were skipped."""

    occurrences: list[Occurrence]
    skipped: list[str] = field(default_factory=list)


def get_store(config: Config) -> JsonEventStore:
    """Resolve the events file from config."""
    return JsonEventStore(config.events_path, default_timezone=config.default_timezone)


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def expand_all(
    definitions: Iterable[EventDefinition],
    expand: Callable[[EventDefinition], list[Occurrence]],
    limit: int | None = None,
) -> Expansion:
    """Expand each definition, skipping (and logging) ones with a bad timezone."""
    groups = []
    skipped = []
    for definition in definitions:
        try:
            groups.append(expand(definition))
        except InvalidTimezone as e:
            logger.warning(f"Skipping event {definition.id}: {e}")
            skipped.append(definition.id)
    return Expansion(merge_occurrences(groups, limit), skipped)


def upcoming(
    repo: EventRepository,
    config: Config,
    now: datetime | None = None,
    days: int | None = None,
    limit: int | None = None,
) -> Expansion:
    """Occurrences starting within the next N days, earliest first."""
    days = clamp(days, config.upcoming_days, 1, MAX_UPCOMING_DAYS)
    limit = clamp(limit, config.upcoming_limit, 1, MAX_UPCOMING_LIMIT)
    window = upcoming_window(_now(now), days)
    logger.debug(f"Expanding upcoming: days={days} limit={limit}")
    return expand_all(
        repo.fetch_all(),
        lambda d: expand_event(d, window, min(limit, config.max_occurrences)),
        limit,
    )


def happening_now(
    repo: EventRepository,
    config: Config,
    now: datetime | None = None,
    limit: int | None = None,
) -> Expansion:
    """Occurrences in progress right now."""
    now = _now(now)
    limit = clamp(limit, config.running_limit, 1, MAX_RUNNING_LIMIT)
    return expand_all(
        repo.fetch_all(),
        lambda d: running_now(d, now, config.max_occurrences),
        limit,
    )


def month_view(
    repo: EventRepository,
    config: Config,
    year: int,
    month: int,
) -> dict[date, list[Occurrence]]:
    """Occurrences in a calendar month, keyed by date in the display zone."""
    first, last = month_bounds(year, month)
    window = Window.for_dates(first, last, config.display_timezone)
    expansion = expand_all(
        repo.fetch_all(),
        lambda d: expand_event(d, window, config.max_occurrences),
    )
    if expansion.skipped:
        logger.info(f"Month view {year}-{month:02d} skipped {len(expansion.skipped)} event(s)")
    return group_by_local_date(expansion.occurrences, config.display_timezone)


def event_occurrences(
    repo: EventRepository,
    config: Config,
    event_id: str,
    range_start: date,
    range_end: date,
    max_occurrences: int | None = None,
) -> list[Occurrence]:
    """Occurrences of a single event. Raises LookupError if the id is unknown."""
    definition = repo.fetch(event_id)
    if definition is None:
        raise LookupError(f"No event with id {event_id!r}")
    cap = config.max_occurrences if max_occurrences is None else max_occurrences
    return expand_event_between(definition, range_start, range_end, cap)


def invalid_timezones(repo: EventRepository) -> list[EventDefinition]:
    """Events whose timezone can't be resolved."""
    bad = []
    for definition in repo.fetch_all():
        try:
            resolve_zone(definition.timezone)
        except InvalidTimezone:
            bad.append(definition)
    return bad
