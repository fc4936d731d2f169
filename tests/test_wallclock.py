"""Tests for wall-clock/instant conversion."""

from datetime import date, datetime, time, timezone

import pytest

from cadence.core.events import Weekday
from cadence.core.wallclock import (
    InvalidTimezone,
    local_date,
    local_time,
    local_weekday,
    resolve_zone,
    to_instant,
)

NY = "America/New_York"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestToInstant:
    def test_standard_time(self):
        assert to_instant(date(2024, 1, 1), time(12, 0), NY) == utc(2024, 1, 1, 17, 0)

    def test_daylight_time(self):
        assert to_instant(date(2024, 7, 1), time(12, 0), NY) == utc(2024, 7, 1, 16, 0)

    def test_result_is_utc(self):
        instant = to_instant(date(2024, 1, 1), time(9, 0), "Europe/Berlin")
        assert instant.tzinfo == timezone.utc
        assert instant == utc(2024, 1, 1, 8, 0)

    def test_spring_forward_gap_resolves_after_transition(self):
        """02:30 doesn't exist on 2024-03-10 in New York - it lands at 03:30 EDT."""
        instant = to_instant(date(2024, 3, 10), time(2, 30), NY)
        assert instant == utc(2024, 3, 10, 7, 30)
        assert local_time(instant, NY) == time(3, 30)

    def test_fall_back_ambiguity_resolves_to_earlier(self):
        """01:30 happens twice on 2024-11-03 - the EDT one comes first."""
        instant = to_instant(date(2024, 11, 3), time(1, 30), NY)
        assert instant == utc(2024, 11, 3, 5, 30)

    def test_ignores_fold_on_input(self):
        instant = to_instant(date(2024, 11, 3), time(1, 30, fold=1), NY)
        assert instant == utc(2024, 11, 3, 5, 30)


class TestInvalidTimezone:
    @pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "", "Not A Zone", "/etc/passwd"])
    def test_unresolvable_names(self, name):
        with pytest.raises(InvalidTimezone):
            to_instant(date(2024, 1, 1), time(9, 0), name)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            resolve_zone("Nowhere/Special")

    def test_keeps_zone_name(self):
        with pytest.raises(InvalidTimezone) as exc_info:
            resolve_zone("Nowhere/Special")
        assert exc_info.value.zone_name == "Nowhere/Special"

    def test_local_date_raises_too(self):
        with pytest.raises(InvalidTimezone):
            local_date(utc(2024, 1, 1), "Nowhere/Special")


class TestLocalDate:
    def test_previous_day_west_of_utc(self):
        assert local_date(utc(2024, 1, 1, 3, 0), NY) == date(2023, 12, 31)

    def test_next_day_east_of_utc(self):
        assert local_date(utc(2024, 1, 1, 20, 0), "Asia/Tokyo") == date(2024, 1, 2)

    def test_naive_instant_is_utc(self):
        assert local_date(datetime(2024, 1, 1, 3, 0), NY) == date(2023, 12, 31)

    def test_weekday(self):
        assert local_weekday(utc(2024, 1, 1, 3, 0), NY) is Weekday.SU
        assert local_weekday(utc(2024, 1, 1, 17, 0), NY) is Weekday.MO


class TestLocalTime:
    def test_wall_clock_time(self):
        assert local_time(utc(2024, 1, 1, 17, 0), NY) == time(12, 0)

    def test_keeps_seconds(self):
        assert local_time(utc(2024, 1, 1, 17, 0, 30), NY) == time(12, 0, 30)
