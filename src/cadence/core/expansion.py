"""Expand event definitions into concrete occurrences - pure, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from .candidates import candidate_dates
from .events import EventDefinition, Frequency, Occurrence, as_utc
from .wallclock import local_date, local_time, resolve_zone, to_instant

DEFAULT_MAX_OCCURRENCES = 100

_EDGE = timedelta(days=2)
# Earliest and latest instants that can be localized into any zone
_FIRST_INSTANT = datetime.min.replace(tzinfo=timezone.utc) + _EDGE
_LAST_INSTANT = datetime.max.replace(tzinfo=timezone.utc) - _EDGE


@dataclass(frozen=True)
class Window:
    """
    A span of UTC instants that occurrences must start within.

    Windows built from instants are closed on both ends. Windows built from
    local dates run from midnight of the first day up to (not including)
    midnight after the last day.
    """

    start: datetime
    end: datetime
    end_exclusive: bool = False

    def __post_init__(self):
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))

    @classmethod
    def for_dates(cls, range_start: date, range_end: date, zone_name: str) -> "Window":
        """Convert local-date bounds to instants once, in the given zone."""
        # Keep both bounds representable as UTC datetimes in any zone
        range_start = max(range_start, date.min + _EDGE)
        range_end = min(range_end, date.max - _EDGE)
        start = to_instant(range_start, time(0, 0), zone_name)
        end = to_instant(range_end + timedelta(days=1), time(0, 0), zone_name)
        return cls(start, end, end_exclusive=True)

    @property
    def is_empty(self) -> bool:
        if self.end_exclusive:
            return self.start >= self.end
        return self.start > self.end

    def contains(self, instant: datetime) -> bool:
        if instant < self.start:
            return False
        if self.end_exclusive:
            return instant < self.end
        return instant <= self.end


def _sort_key(occ: Occurrence) -> tuple[datetime, datetime]:
    return (occ.start, occ.end)


def effective_times(definition: EventDefinition) -> tuple[time, ...]:
    """Times-of-day an event recurs at, falling back to its base wall-clock time."""
    if definition.times:
        return definition.times
    return (local_time(definition.base_start, definition.timezone),)


def materialize(
    definition: EventDefinition,
    day: date,
    times: Iterable[time],
) -> list[Occurrence]:
    """Concrete occurrences of an event on one local date."""
    if definition.frequency is Frequency.NONE:
        starts = [definition.base_start]
    else:
        starts = [to_instant(day, t, definition.timezone) for t in times]

    duration = definition.duration
    return [
        Occurrence(
            event_id=definition.id,
            start=start,
            end=start + duration,
            title=definition.title,
            category=definition.category,
            timezone=definition.timezone,
        )
        for start in starts
    ]


def sort_and_dedupe(occurrences: Iterable[Occurrence]) -> list[Occurrence]:
    """Order by (start, end), keeping the first of any exact (start, end) repeat."""
    seen: set[tuple[datetime, datetime]] = set()
    result = []
    for occ in sorted(occurrences, key=_sort_key):
        key = _sort_key(occ)
        if key in seen:
            continue
        seen.add(key)
        result.append(occ)
    return result


def expand_event(
    definition: EventDefinition,
    window: Window,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> list[Occurrence]:
    """
    Occurrences of an event that start within a window.

    Pure function - no I/O, no state kept between calls.

    Args:
        definition: The event to expand
        window: UTC bounds occurrences must start within
        max_occurrences: Generation stops once this many occurrences are found

    Returns:
        At most max_occurrences occurrences, ascending by start

    Raises:
        InvalidTimezone: The event's zone can't be resolved
    """
    zone = definition.timezone
    resolve_zone(zone)

    if max_occurrences <= 0 or window.is_empty:
        return []

    anchor = local_date(definition.base_start, zone)
    range_start = local_date(max(window.start, _FIRST_INSTANT), zone)
    range_end = local_date(min(window.end, _LAST_INSTANT), zone)
    times = effective_times(definition)

    found: list[Occurrence] = []
    seen: set[tuple[datetime, datetime]] = set()
    days = candidate_dates(
        definition.frequency,
        definition.by_weekday,
        anchor,
        range_start,
        range_end,
        definition.until,
    )
    for day in days:
        # Order within the day first so the cap keeps the earliest ones
        for occ in sorted(materialize(definition, day, times), key=_sort_key):
            if not window.contains(occ.start):
                continue
            key = _sort_key(occ)
            if key in seen:
                continue
            seen.add(key)
            found.append(occ)
            if len(found) >= max_occurrences:
                return sort_and_dedupe(found)

    return sort_and_dedupe(found)


def expand_event_between(
    definition: EventDefinition,
    range_start: date,
    range_end: date,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> list[Occurrence]:
    """Occurrences of an event on local dates range_start..range_end (inclusive)."""
    resolve_zone(definition.timezone)
    if range_start > range_end:
        return []
    window = Window.for_dates(range_start, range_end, definition.timezone)
    return expand_event(definition, window, max_occurrences)
