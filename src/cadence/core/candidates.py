"""Candidate local dates for a recurring event."""

from datetime import date, datetime
from typing import Iterator

from dateutil import rrule

from .events import Frequency, Weekday


def effective_weekdays(by_weekday: frozenset[Weekday], anchor: date) -> frozenset[Weekday]:
    """The weekday filter for WEEKLY events, falling back to the anchor's weekday."""
    return by_weekday or frozenset({Weekday.from_date(anchor)})


def candidate_dates(
    frequency: Frequency,
    by_weekday: frozenset[Weekday],
    anchor: date,
    range_start: date,
    range_end: date,
    until: date | None = None,
) -> Iterator[date]:
    """
    Yield the local dates an event may occur on, ascending.

    Pure function - no I/O.

    Args:
        frequency: Recurrence cadence
        by_weekday: Weekday filter (WEEKLY only)
        anchor: Local date of the event's first occurrence
        range_start: First local date of the query window
        range_end: Last local date of the query window (inclusive)
        until: Last local date the event may recur on (inclusive)
    """
    if range_start > range_end:
        return
    if until is not None and until < anchor:
        return

    if frequency is Frequency.NONE:
        if range_start <= anchor <= range_end:
            yield anchor
        return

    first = max(range_start, anchor)
    last = range_end if until is None else min(range_end, until)
    if first > last:
        return

    byweekday = None
    if frequency is Frequency.WEEKLY:
        byweekday = [wd.rrule_day for wd in effective_weekdays(by_weekday, anchor)]

    rule = rrule.rrule(
        rrule.DAILY,
        dtstart=datetime.combine(first, datetime.min.time()),
        until=datetime.combine(last, datetime.min.time()),
        byweekday=byweekday,
    )
    for dt in rule:
        yield dt.date()
