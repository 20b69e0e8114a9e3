"""
Working-window constraints: which part of each local day may hold focus blocks.
"""

from datetime import date, time
from typing import Mapping, Optional, Tuple

from ..core.clock import TimezoneClock, weekday_name
from ..core.time_slot import TimeSlot, AVAILABLE


def parse_hhmm(value: str) -> time:
    """Parse a 24-hour "HH:MM" string."""
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))


def _day_config(working_window: Mapping, day_name: str) -> Optional[Tuple[bool, str, str]]:
    # Accepts both pydantic DayWindow objects and raw dicts from settings
    config = working_window.get(day_name) if working_window else None
    if config is None:
        return None
    if isinstance(config, Mapping):
        return bool(config.get("enabled")), config.get("start"), config.get("end")
    return bool(config.enabled), config.start, config.end


def window_for(day: date, working_window: Mapping, clock: TimezoneClock) -> Optional[TimeSlot]:
    """
    Working window of a local calendar date, or None when the day
    is missing from the configuration or disabled.
    """
    config = _day_config(working_window, weekday_name(day))
    if config is None:
        return None

    enabled, start, end = config
    if not enabled:
        return None

    return TimeSlot(clock.at(day, parse_hhmm(start)), clock.at(day, parse_hhmm(end)), AVAILABLE)


def bounds_for(day: date, working_window: Mapping, clock: TimezoneClock) -> Tuple[TimeSlot, bool]:
    """
    The interval an operation on `day` has to stay within, and whether it is
    the working window. Disabled days fall back to the whole local day.
    """
    window = window_for(day, working_window, clock)
    if window is not None:
        return window, True
    return TimeSlot(clock.start_of_day(day), clock.end_of_day(day), AVAILABLE), False


def is_within_window(slot: TimeSlot, window: Optional[TimeSlot]) -> bool:
    return window is not None and window.contains(slot)
