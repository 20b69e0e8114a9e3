"""
Tests for working-window lookup per local calendar date.
"""

from datetime import date, time

from focusblocks.schemas import DayWindow
from focusblocks.scheduling.constraints.time_constraints import bounds_for, is_within_window, parse_hhmm, window_for
from focusblocks.scheduling.core.time_slot import TimeSlot

from tests.helpers import utc

MONDAY = date(2024, 1, 22)
SATURDAY = date(2024, 1, 27)


def test_parse_hhmm():
    assert parse_hhmm("06:30") == time(6, 30)
    assert parse_hhmm(" 17:00 ") == time(17, 0)


class TestWindowFor:

    def test_enabled_day(self, working_window, clock):
        window = window_for(MONDAY, working_window, clock)
        assert window == TimeSlot(utc(2024, 1, 22, 14), utc(2024, 1, 22, 22))

    def test_disabled_day(self, working_window, clock):
        assert window_for(SATURDAY, working_window, clock) is None

    def test_missing_day(self, clock):
        assert window_for(MONDAY, {"tuesday": {"enabled": True, "start": "09:00", "end": "17:00"}}, clock) is None

    def test_accepts_validated_day_windows(self, clock):
        config = {"monday": DayWindow(enabled=True, start="08:00", end="12:00")}
        window = window_for(MONDAY, config, clock)
        assert window == TimeSlot(utc(2024, 1, 22, 13), utc(2024, 1, 22, 17))

    def test_window_follows_dst(self, working_window, clock):
        # First working day after spring-forward is on EDT (UTC-4)
        window = window_for(date(2024, 3, 11), working_window, clock)
        assert window.start == utc(2024, 3, 11, 13)


class TestBoundsFor:

    def test_working_day_bounds_are_the_window(self, working_window, clock):
        bounds, is_working_window = bounds_for(MONDAY, working_window, clock)
        assert is_working_window is True
        assert bounds == window_for(MONDAY, working_window, clock)

    def test_disabled_day_falls_back_to_whole_day(self, working_window, clock):
        bounds, is_working_window = bounds_for(SATURDAY, working_window, clock)
        assert is_working_window is False
        assert bounds == TimeSlot(utc(2024, 1, 27, 5), utc(2024, 1, 28, 5))


def test_is_within_window(working_window, clock):
    window = window_for(MONDAY, working_window, clock)
    assert is_within_window(TimeSlot(utc(2024, 1, 22, 14), utc(2024, 1, 22, 15)), window)
    assert not is_within_window(TimeSlot(utc(2024, 1, 22, 21, 45), utc(2024, 1, 22, 22, 15)), window)
    assert not is_within_window(TimeSlot(utc(2024, 1, 22, 14), utc(2024, 1, 22, 15)), None)
