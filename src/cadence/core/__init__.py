"""Functional core - pure recurrence logic with no I/O."""

from .events import (
    EventDefinition,
    EventParseError,
    Frequency,
    Occurrence,
    Weekday,
    parse_event,
)
from .wallclock import InvalidTimezone, to_instant, local_date
from .candidates import candidate_dates
from .expansion import Window, expand_event, expand_event_between, sort_and_dedupe
from .schedule import Countdown, CountdownStatus, countdown, merge_occurrences, running_now

__all__ = [
    # Events
    "EventDefinition",
    "EventParseError",
    "Frequency",
    "Occurrence",
    "Weekday",
    "parse_event",
    # Wall clock
    "InvalidTimezone",
    "to_instant",
    "local_date",
    # Expansion
    "candidate_dates",
    "Window",
    "expand_event",
    "expand_event_between",
    "sort_and_dedupe",
    # Schedule
    "Countdown",
    "CountdownStatus",
    "countdown",
    "merge_occurrences",
    "running_now",
]
