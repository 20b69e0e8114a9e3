"""
Resolution of loosely formatted times into future instants.

Reschedule operations come from a language model and may name a weekday
("friday", "next tue"), give an ISO timestamp with or without an offset,
or use a human date ("Feb 6 2pm"). Everything is resolved in the user's timezone.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser

from ..core.clock import TimezoneClock, to_utc
from ..core.errors import UnresolvableInstant

ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$")
YEAR_PATTERN = re.compile(r"\b\d{4}\b")
NEXT_PATTERN = re.compile(r"\bnext\b", re.IGNORECASE)
CLOCK_PATTERN = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b|\b(\d{1,2}):(\d{2})\b", re.IGNORECASE)
# A month name or a numeric date: the text names a specific day, not just a weekday
DATE_HINT_PATTERN = re.compile(
    r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\b|\b\d{1,2}/\d{1,2}\b|\b\d{4}-\d{2}-\d{2}\b",
    re.IGNORECASE,
)
UNRECOGNIZED_FORMAT = "unrecognized date format"

# Index follows WallClockTime.weekday: 0=Sunday
WEEKDAY_ALIASES = [
    (0, re.compile(r"\b(sunday|sun)\b", re.IGNORECASE)),
    (1, re.compile(r"\b(monday|mon)\b", re.IGNORECASE)),
    (2, re.compile(r"\b(tuesday|tue|tues)\b", re.IGNORECASE)),
    (3, re.compile(r"\b(wednesday|wed)\b", re.IGNORECASE)),
    (4, re.compile(r"\b(thursday|thu|thur|thurs)\b", re.IGNORECASE)),
    (5, re.compile(r"\b(friday|fri)\b", re.IGNORECASE)),
    (6, re.compile(r"\b(saturday|sat)\b", re.IGNORECASE)),
]


def parse_instant(value: str, clock: TimezoneClock) -> Optional[datetime]:
    """Parse an ISO timestamp. Timestamps without an offset are read as local wall-clock time."""
    text = (value or "").strip()
    if not ISO_PATTERN.match(text):
        return None
    try:
        parsed = date_parser.isoparse(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return clock.localize_naive(parsed)
    return to_utc(parsed)


def find_weekday_index(text: str) -> Optional[int]:
    for index, pattern in WEEKDAY_ALIASES:
        if pattern.search(text):
            return index
    return None


def find_time_of_day(text: str) -> Optional[time]:
    """A clock time written next to a weekday ("friday 3pm", "tue 14:30")."""
    match = CLOCK_PATTERN.search(text)
    if not match:
        return None
    if match.group(3):
        hour = int(match.group(1)) % 12
        if match.group(3).lower() == "pm":
            hour += 12
        minute = int(match.group(2) or 0)
    else:
        hour, minute = int(match.group(4)), int(match.group(5))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def next_weekday(index: int, reference: date) -> date:
    """The next date (today included) falling on weekday `index` (0=Sunday)."""
    offset = (index - reference.isoweekday() % 7) % 7
    return reference + timedelta(days=offset)


def resolve_future_instant(value: str, clock: TimezoneClock, now: datetime,
                           time_of_day: time, align_with: Optional[datetime] = None) -> datetime:
    """
    Resolve `value` to an instant strictly after `now`.

    Text naming a month or a numeric date is parsed as that date first.
    Other weekday names resolve to their next occurrence at the clock time written
    with them, else the wall-clock time of `align_with`, else `time_of_day`; "next <weekday>" skips one
    more week. Month/day strings without a year roll forward to the next year.
    Raises UnresolvableInstant when nothing parses or the instant is not in the future.
    """
    text = (value or "").strip()
    if not text:
        raise UnresolvableInstant(value, "empty time value")

    now = to_utc(now)

    instant = parse_instant(text, clock)
    if instant is not None:
        if instant <= now:
            raise UnresolvableInstant(value, "time is not in the future")
        return instant

    weekday_index = find_weekday_index(text)
    if weekday_index is not None and not DATE_HINT_PATTERN.search(text):
        return _resolve_weekday(weekday_index, text, clock, now, time_of_day, align_with)

    if weekday_index is not None:
        # "Friday, February 9": the date wins, the weekday is only a fallback
        try:
            return _resolve_general(value, text, clock, now)
        except UnresolvableInstant as e:
            if e.reason != UNRECOGNIZED_FORMAT:
                raise
            return _resolve_weekday(weekday_index, text, clock, now, time_of_day, align_with)

    return _resolve_general(value, text, clock, now)


def _resolve_weekday(weekday_index: int, text: str, clock: TimezoneClock, now: datetime,
                     time_of_day: time, align_with: Optional[datetime]) -> datetime:
    written_time = find_time_of_day(text)
    if written_time is not None:
        time_of_day = written_time
    elif align_with is not None:
        aligned = clock.wall_clock_of(align_with)
        time_of_day = time(aligned.hour, aligned.minute)

    day = next_weekday(weekday_index, clock.local_date(now))
    if NEXT_PATTERN.search(text):
        day += timedelta(days=7)

    candidate = clock.at(day, time_of_day)
    while candidate <= now:
        day += timedelta(days=7)
        candidate = clock.at(day, time_of_day)
    return candidate


def _resolve_general(value: str, text: str, clock: TimezoneClock, now: datetime) -> datetime:
    local_now = clock.wall_clock_of(now)
    default = datetime(local_now.year, local_now.month, local_now.day)
    try:
        parsed = date_parser.parse(text, default=default)
    except (ValueError, OverflowError):
        raise UnresolvableInstant(value, UNRECOGNIZED_FORMAT)

    if parsed.tzinfo is not None:
        instant = to_utc(parsed)
    else:
        instant = clock.localize_naive(parsed)

    if instant <= now and not YEAR_PATTERN.search(text):
        # "Feb 6" already passed this year: the user means next year's
        for years_ahead in range(1, 5):
            try:
                rolled = parsed.replace(year=parsed.year + years_ahead)
            except ValueError:
                continue  # Feb 29
            instant = to_utc(rolled) if rolled.tzinfo is not None else clock.localize_naive(rolled)
            if instant > now:
                break

    if instant <= now:
        raise UnresolvableInstant(value, "time is not in the future")
    return instant
