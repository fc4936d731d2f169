"""Display-window helpers built on expansion - pure, no I/O."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from .events import EventDefinition, Occurrence, as_utc
from .expansion import DEFAULT_MAX_OCCURRENCES, Window, expand_event
from .wallclock import local_date

STARTING_SOON = timedelta(hours=1)


def clamp(value: int | None, default: int, lo: int, hi: int) -> int:
    """Bound an integer query parameter, using default when it's missing or below lo."""
    if value is None or value < lo:
        return default
    return min(hi, value)


def merge_occurrences(
    groups: Iterable[list[Occurrence]],
    limit: int | None = None,
) -> list[Occurrence]:
    """Flatten per-event occurrence lists into one ordered list."""
    merged = sorted(
        (occ for group in groups for occ in group),
        key=lambda o: (o.start, o.end),
    )
    if limit is not None:
        return merged[: max(limit, 0)]
    return merged


def upcoming_window(now: datetime, days: int) -> Window:
    """From now through the next N days."""
    now = as_utc(now)
    return Window(now, now + timedelta(days=days))


def running_window(definition: EventDefinition, now: datetime) -> Window:
    """Start instants that would still be in progress at now."""
    now = as_utc(now)
    return Window(now - definition.duration, now)


def is_running(occurrence: Occurrence, now: datetime) -> bool:
    now = as_utc(now)
    return occurrence.start <= now < occurrence.end


def running_now(
    definition: EventDefinition,
    now: datetime,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> list[Occurrence]:
    """Occurrences of one event in progress at now."""
    occurrences = expand_event(definition, running_window(definition, now), max_occurrences)
    return [o for o in occurrences if is_running(o, now)]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last date of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def group_by_local_date(
    occurrences: Iterable[Occurrence],
    zone_name: str,
) -> dict[date, list[Occurrence]]:
    """Bucket occurrences by their start date in a display zone."""
    grouped: dict[date, list[Occurrence]] = {}
    for occ in sorted(occurrences, key=lambda o: (o.start, o.end)):
        grouped.setdefault(local_date(occ.start, zone_name), []).append(occ)
    return grouped


# ============== Countdown ==============


class CountdownStatus(Enum):
    UPCOMING = "upcoming"
    STARTING_SOON = "starting-soon"
    HAPPENING_NOW = "happening-now"
    ENDED = "ended"


@dataclass
class Countdown:
    """Where an occurrence sits relative to now."""

    status: CountdownStatus
    label: str
    seconds_until: float


def _pluralize(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_span(delta: timedelta) -> str:
    """Human-readable span: '3 days', '2 hours', '5 minutes', 'less than a minute'."""
    minutes = int(delta.total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24
    if days > 0:
        return _pluralize(days, "day")
    if hours > 0:
        return _pluralize(hours, "hour")
    if minutes > 0:
        return _pluralize(minutes, "minute")
    return "less than a minute"


def countdown(occurrence: Occurrence, now: datetime) -> Countdown:
    """
    Classify an occurrence as upcoming, starting soon, happening now, or ended.

    Starting soon means it starts within the next hour.
    """
    now = as_utc(now)
    until_start = occurrence.start - now
    until_end = occurrence.end - now

    if until_end <= timedelta(0):
        return Countdown(CountdownStatus.ENDED, "Ended", until_end.total_seconds())

    if until_start <= timedelta(0):
        return Countdown(
            CountdownStatus.HAPPENING_NOW,
            f"Happening now! {format_span(until_end)} left",
            until_start.total_seconds(),
        )

    status = CountdownStatus.STARTING_SOON if until_start <= STARTING_SOON else CountdownStatus.UPCOMING
    return Countdown(status, f"Starts in {format_span(until_start)}", until_start.total_seconds())
