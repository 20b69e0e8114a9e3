"""
Timezone clock: converts between absolute instants and wall-clock times
in a named timezone.

Every other part of the engine builds instants from a day/hour/minute
through this class, so DST handling lives in one place.
"""

from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Optional

import pytz

from .constants import DAY_NAMES
from .errors import InvalidTimezone


class WallClockTime(NamedTuple):
    """A local calendar time. Only meaningful together with a timezone."""
    year: int
    month: int
    day: int
    hour: int
    minute: int
    weekday: int = 0  # 0=Sunday .. 6=Saturday
    is_dst: Optional[bool] = None

    def date(self) -> date:
        return date(self.year, self.month, self.day)


def to_utc(instant: datetime) -> datetime:
    """Normalize an aware datetime to UTC. Naive datetimes are rejected."""
    if instant.tzinfo is None or instant.tzinfo.utcoffset(instant) is None:
        raise ValueError(f"Instant must carry a UTC offset: {instant!r}")
    return instant.astimezone(pytz.utc)


class TimezoneClock:
    """
    Wall-clock <-> instant conversion for one timezone.

    Non-existent local times (spring-forward gap) resolve forward:
    02:30 on the New York spring-forward day becomes 03:30 EDT.
    Ambiguous local times (fall-back) resolve to the standard-time occurrence
    unless the WallClockTime carries is_dst from wall_clock_of().
    """

    def __init__(self, timezone_name: str):
        if not timezone_name:
            raise InvalidTimezone(timezone_name)
        try:
            self.tz = pytz.timezone(timezone_name)
        except pytz.UnknownTimeZoneError:
            raise InvalidTimezone(timezone_name)
        self.timezone_name = timezone_name

    def wall_clock_of(self, instant: datetime) -> WallClockTime:
        local = to_utc(instant).astimezone(self.tz)
        return WallClockTime(
            year=local.year,
            month=local.month,
            day=local.day,
            hour=local.hour,
            minute=local.minute,
            weekday=local.isoweekday() % 7,
            is_dst=bool(local.dst()),
        )

    def instant_of(self, wall_clock: WallClockTime) -> datetime:
        naive = datetime(wall_clock.year, wall_clock.month, wall_clock.day, wall_clock.hour, wall_clock.minute)
        is_dst = False if wall_clock.is_dst is None else wall_clock.is_dst
        localized = self.tz.localize(naive, is_dst=is_dst)
        return localized.astimezone(pytz.utc)

    def at(self, day: date, local_time: time) -> datetime:
        """Instant of `local_time` on the local calendar date `day`."""
        return self.instant_of(WallClockTime(day.year, day.month, day.day, local_time.hour, local_time.minute))

    def localize_naive(self, naive: datetime) -> datetime:
        """Read a naive datetime as wall-clock time in this timezone."""
        return self.at(naive.date(), naive.time())

    def local_date(self, instant: datetime) -> date:
        return self.wall_clock_of(instant).date()

    def local_hour(self, instant: datetime) -> int:
        return self.wall_clock_of(instant).hour

    def start_of_day(self, day: date) -> datetime:
        return self.at(day, time(0, 0))

    def end_of_day(self, day: date) -> datetime:
        return self.start_of_day(day + timedelta(days=1))

    def __repr__(self):
        return f"TimezoneClock({self.timezone_name})"


def weekday_name(day: date) -> str:
    """Lowercase English weekday name of a calendar date."""
    return DAY_NAMES[day.isoweekday() % 7]


def format_instant(instant: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, the format exchanged with calendars."""
    return to_utc(instant).strftime("%Y-%m-%dT%H:%M:%SZ")
