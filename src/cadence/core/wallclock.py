"""Conversion between local wall-clock times and UTC instants."""

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .events import Weekday


class InvalidTimezone(ValueError):
    """The zone name can't be resolved against the time zone database."""

    def __init__(self, zone_name):
        self.zone_name = zone_name
        super().__init__(f"Unknown timezone: {zone_name!r}")


def resolve_zone(zone_name: str) -> ZoneInfo:
    """Look up an IANA zone, raising InvalidTimezone if it can't be found."""
    if not isinstance(zone_name, str) or not zone_name:
        raise InvalidTimezone(zone_name)
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        # ValueError covers malformed keys like absolute paths
        raise InvalidTimezone(zone_name) from e


def to_instant(local_day: date, time_of_day: time, zone_name: str) -> datetime:
    """
    UTC instant of a local wall-clock moment.

    fold=0 gives the zone's pre-transition offset: a time inside a
    spring-forward gap lands after the transition (02:30 -> 03:30 daylight),
    and an ambiguous fall-back time resolves to its earlier instant.
    """
    zone = resolve_zone(zone_name)
    local = datetime.combine(local_day, time_of_day.replace(tzinfo=None, fold=0), tzinfo=zone)
    return local.astimezone(timezone.utc)


def _localize(instant: datetime, zone_name: str) -> datetime:
    zone = resolve_zone(zone_name)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(zone)


def local_date(instant: datetime, zone_name: str) -> date:
    """Calendar date of an instant in the given zone."""
    return _localize(instant, zone_name).date()


def local_weekday(instant: datetime, zone_name: str) -> Weekday:
    """Weekday of an instant in the given zone."""
    return Weekday.from_date(local_date(instant, zone_name))


def local_time(instant: datetime, zone_name: str) -> time:
    """Wall-clock time-of-day of an instant in the given zone."""
    return _localize(instant, zone_name).time().replace(fold=0)
