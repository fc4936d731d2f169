"""Event definitions and occurrences - no I/O dependencies."""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum

from dateutil import rrule

DEFAULT_TIMEZONE = "America/New_York"

_HHMM = re.compile(r"^(\d{2}):(\d{2})$")


class Frequency(Enum):
    """How often an event repeats."""

    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"


class Weekday(Enum):
    """Two-letter weekday codes."""

    SU = "SU"
    MO = "MO"
    TU = "TU"
    WE = "WE"
    TH = "TH"
    FR = "FR"
    SA = "SA"

    @property
    def index(self) -> int:
        """Python weekday index (Monday == 0)."""
        return _PY_INDEX[self]

    @property
    def rrule_day(self) -> rrule.weekday:
        return _RRULE_DAYS[self]

    @classmethod
    def from_date(cls, d: date) -> "Weekday":
        return _BY_INDEX[d.weekday()]


_PY_INDEX = {
    Weekday.MO: 0,
    Weekday.TU: 1,
    Weekday.WE: 2,
    Weekday.TH: 3,
    Weekday.FR: 4,
    Weekday.SA: 5,
    Weekday.SU: 6,
}
_BY_INDEX = {i: wd for wd, i in _PY_INDEX.items()}
_RRULE_DAYS = {
    Weekday.MO: rrule.MO,
    Weekday.TU: rrule.TU,
    Weekday.WE: rrule.WE,
    Weekday.TH: rrule.TH,
    Weekday.FR: rrule.FR,
    Weekday.SA: rrule.SA,
    Weekday.SU: rrule.SU,
}


class EventParseError(ValueError):
    """A stored event record can't be turned into an EventDefinition."""


def as_utc(dt: datetime) -> datetime:
    """Normalize to an aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class EventDefinition:
    """A stored event that may repeat on a schedule."""

    id: str
    base_start: datetime
    base_end: datetime
    timezone: str = DEFAULT_TIMEZONE
    frequency: Frequency = Frequency.NONE
    by_weekday: frozenset[Weekday] = frozenset()
    times: tuple[time, ...] = ()
    until: date | None = None
    title: str = ""
    category: str = ""

    def __post_init__(self):
        object.__setattr__(self, "base_start", as_utc(self.base_start))
        object.__setattr__(self, "base_end", as_utc(self.base_end))

    @property
    def duration(self) -> timedelta:
        return self.base_end - self.base_start

    @property
    def is_recurring(self) -> bool:
        return self.frequency is not Frequency.NONE


@dataclass(frozen=True)
class Occurrence:
    """One concrete, time-bound materialization of an event."""

    event_id: str
    start: datetime
    end: datetime
    title: str = ""
    category: str = ""
    timezone: str = DEFAULT_TIMEZONE

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_minutes(self) -> int:
        return int(self.duration.total_seconds() / 60)

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "title": self.title,
            "category": self.category,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "timezone": self.timezone,
        }


# ============== Boundary parsing ==============


def parse_frequency(raw) -> Frequency:
    """Parse a frequency name. Anything unrecognized is NONE."""
    if isinstance(raw, Frequency):
        return raw
    if not isinstance(raw, str):
        return Frequency.NONE
    try:
        return Frequency(raw.strip().upper())
    except ValueError:
        return Frequency.NONE


def parse_weekdays(raw) -> frozenset[Weekday]:
    """Keep only well-formed weekday codes from a loosely-typed list."""
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return frozenset()
    days = set()
    for item in raw:
        if isinstance(item, Weekday):
            days.add(item)
        elif isinstance(item, str) and item in Weekday.__members__:
            days.add(Weekday[item])
    return frozenset(days)


def parse_time_of_day(raw) -> time | None:
    """Parse a strict HH:MM string, returning None if it's malformed."""
    if isinstance(raw, time):
        return raw
    if not isinstance(raw, str):
        return None
    m = _HHMM.match(raw)
    if not m:
        return None
    hh, mm = int(m.group(1)), int(m.group(2))
    if hh > 23 or mm > 59:
        return None
    return time(hh, mm)


def parse_times(raw) -> tuple[time, ...]:
    """Keep only well-formed HH:MM entries, in their original order."""
    if not isinstance(raw, (list, tuple)):
        return ()
    parsed = (parse_time_of_day(item) for item in raw)
    return tuple(t for t in parsed if t is not None)


def _parse_instant(value, key: str) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str) or not value:
        raise EventParseError(f"missing {key}")
    try:
        # fromisoformat doesn't take a trailing Z before 3.11
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError as e:
        raise EventParseError(f"invalid {key}: {value!r}") from e


def _parse_until(value, zone_name: str) -> date | None:
    """An ISO date, or an ISO datetime reduced to its local date in the event zone."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        instant = as_utc(value)
    elif isinstance(value, date):
        return value
    elif isinstance(value, str):
        if len(value) == 10:
            try:
                return date.fromisoformat(value)
            except ValueError as e:
                raise EventParseError(f"invalid recurrenceUntil: {value!r}") from e
        instant = _parse_instant(value, "recurrenceUntil")
    else:
        raise EventParseError(f"invalid recurrenceUntil: {value!r}")

    from .wallclock import InvalidTimezone, local_date

    try:
        return local_date(instant, zone_name)
    except InvalidTimezone:
        # Zone errors are reported when the event is expanded
        return instant.date()


def parse_event(record: dict, default_timezone: str = DEFAULT_TIMEZONE) -> EventDefinition:
    """
    Build an EventDefinition from a loosely-typed stored record.

    Weekday and time lists are cleaned rather than rejected. A record with no
    id, unusable start/end, or end not after start raises EventParseError.
    """
    event_id = record.get("id")
    if event_id is None or str(event_id) == "":
        raise EventParseError("missing id")

    start = _parse_instant(record.get("startAt"), "startAt")
    end = _parse_instant(record.get("endAt"), "endAt")
    if end <= start:
        raise EventParseError(f"event {event_id}: endAt must be after startAt")

    tz_name = record.get("timezone")
    if not isinstance(tz_name, str) or not tz_name.strip():
        tz_name = default_timezone
    tz_name = tz_name.strip()

    return EventDefinition(
        id=str(event_id),
        base_start=start,
        base_end=end,
        timezone=tz_name,
        frequency=parse_frequency(record.get("recurrenceFreq")),
        by_weekday=parse_weekdays(record.get("byWeekday")),
        times=parse_times(record.get("times")),
        until=_parse_until(record.get("recurrenceUntil"), tz_name),
        title=str(record.get("title") or ""),
        category=str(record.get("category") or ""),
    )
