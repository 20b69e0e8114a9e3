"""
Tests for resolving loosely formatted times into future instants.

"Now" is Wednesday 2024-01-24 10:00 EST.
"""

from datetime import time

import pytest

from focusblocks.scheduling.core.errors import UnresolvableInstant
from focusblocks.scheduling.utils.date_resolution import (
    find_time_of_day,
    find_weekday_index,
    parse_instant,
    resolve_future_instant,
)

from tests.helpers import utc

NOW = utc(2024, 1, 24, 15)
NINE = time(9, 0)


def resolve(value, clock, align_with=None):
    return resolve_future_instant(value, clock, NOW, NINE, align_with=align_with)


class TestIsoTimestamps:

    def test_utc_timestamp(self, clock):
        assert resolve("2024-01-25T15:00:00Z", clock) == utc(2024, 1, 25, 15)

    def test_offset_timestamp(self, clock):
        assert resolve("2024-01-25T10:00:00-05:00", clock) == utc(2024, 1, 25, 15)

    def test_naive_timestamp_is_local(self, clock):
        assert resolve("2024-01-25T10:00:00", clock) == utc(2024, 1, 25, 15)

    def test_past_timestamp_rejected(self, clock):
        with pytest.raises(UnresolvableInstant) as excinfo:
            resolve("2024-01-24T14:00:00Z", clock)
        assert excinfo.value.reason == "time is not in the future"

    def test_parse_instant_ignores_non_iso(self, clock):
        assert parse_instant("friday", clock) is None
        assert parse_instant("", clock) is None


class TestWeekdays:

    def test_next_occurrence_at_default_hour(self, clock):
        assert resolve("friday", clock) == utc(2024, 1, 26, 14)

    def test_abbreviation(self, clock):
        assert resolve("Thu", clock) == utc(2024, 1, 25, 14)

    def test_next_skips_a_week(self, clock):
        assert resolve("next friday", clock) == utc(2024, 2, 2, 14)

    def test_today_already_past_rolls_a_week(self, clock):
        # Wednesday 09:00 has passed at 10:00
        assert resolve("wednesday", clock) == utc(2024, 1, 31, 14)

    def test_written_time_wins(self, clock):
        assert resolve("wednesday 3pm", clock) == utc(2024, 1, 24, 20)
        assert resolve("fri 14:30", clock) == utc(2024, 1, 26, 19, 30)

    def test_aligns_with_previous_start(self, clock):
        previous = utc(2024, 1, 22, 19, 30)  # Monday 14:30 EST
        assert resolve("thursday", clock, align_with=previous) == utc(2024, 1, 25, 19, 30)

    def test_find_weekday_index(self):
        assert find_weekday_index("move to Sunday") == 0
        assert find_weekday_index("sat") == 6
        assert find_weekday_index("tomorrow") is None

    @pytest.mark.parametrize("text, expected", [
        ("friday 3pm", time(15, 0)),
        ("tue 12am", time(0, 0)),
        ("mon 12pm", time(12, 0)),
        ("thursday 9:45", time(9, 45)),
        ("friday", None),
    ])
    def test_find_time_of_day(self, text, expected):
        assert find_time_of_day(text) == expected


class TestHumanDates:

    def test_weekday_with_full_date_keeps_the_date(self, clock):
        assert resolve("Friday, February 9, 2024 10am", clock) == utc(2024, 2, 9, 15)

    def test_weekday_with_month_day(self, clock):
        assert resolve("Tue Feb 13 2pm", clock) == utc(2024, 2, 13, 19)

    def test_weekday_with_past_date_rejected(self, clock):
        with pytest.raises(UnresolvableInstant):
            resolve("Monday, January 22, 2024", clock)

    def test_month_day_with_time(self, clock):
        assert resolve("Feb 6 2pm", clock) == utc(2024, 2, 6, 19)

    def test_past_month_day_rolls_to_next_year(self, clock):
        assert resolve("Jan 2", clock) == utc(2025, 1, 2, 5)

    def test_past_date_with_year_rejected(self, clock):
        with pytest.raises(UnresolvableInstant):
            resolve("Jan 2 2023", clock)

    @pytest.mark.parametrize("value", ["gibberish", "", "   "])
    def test_unrecognized(self, clock, value):
        with pytest.raises(UnresolvableInstant):
            resolve(value, clock)
