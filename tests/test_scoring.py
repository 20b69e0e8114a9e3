"""
Tests for candidate scoring and day ordering.
"""

from types import SimpleNamespace

import pytest

from focusblocks.scheduling.core.time_slot import TimeSlot
from focusblocks.scheduling.scoring.slot_scoring import calculate_slot_score, pick_best_candidate
from focusblocks.scheduling.scoring.time_scoring import calculate_time_of_day_score, calculate_time_preference_score
from focusblocks.scheduling.scoring.workload_scoring import calculate_utilization, order_days_for_goal

from tests.helpers import utc

PREFERRED = TimeSlot(utc(2024, 1, 22, 11), utc(2024, 1, 22, 14))  # 06:00-09:00 EST


class TestTimePreference:

    def test_inside_preferred_window(self):
        candidate = TimeSlot(utc(2024, 1, 22, 11), utc(2024, 1, 22, 13))
        assert calculate_time_preference_score(candidate, PREFERRED, 6) == 2100

    def test_partly_outside_preferred_window(self):
        candidate = TimeSlot(utc(2024, 1, 22, 13), utc(2024, 1, 22, 15))
        assert calculate_time_preference_score(candidate, PREFERRED, 8) == -400

    @pytest.mark.parametrize("hour, expected", [
        (7, -20), (8, 0), (9, 0), (10, 50), (16, 50), (17, 0), (19, 0), (20, -20),
    ])
    def test_time_of_day(self, hour, expected):
        assert calculate_time_of_day_score(hour) == expected


class TestSlotScore:

    def test_uses_local_hour(self, clock):
        ten_am = TimeSlot(utc(2024, 1, 22, 15), utc(2024, 1, 22, 15, 30))
        nine_am = TimeSlot(utc(2024, 1, 22, 14), utc(2024, 1, 22, 14, 30))
        assert calculate_slot_score(ten_am, None, clock) == 150
        assert calculate_slot_score(nine_am, None, clock) == 100

    def test_ties_go_to_earliest_start(self):
        early = TimeSlot(utc(2024, 1, 22, 15), utc(2024, 1, 22, 15, 30))
        late = TimeSlot(utc(2024, 1, 22, 16), utc(2024, 1, 22, 16, 30))
        assert pick_best_candidate([(150, late), (150, early), (100, early)]) is early

    def test_highest_score_wins(self):
        early = TimeSlot(utc(2024, 1, 22, 15), utc(2024, 1, 22, 15, 30))
        late = TimeSlot(utc(2024, 1, 22, 16), utc(2024, 1, 22, 16, 30))
        assert pick_best_candidate([(100, early), (150, late)]) is late

    def test_no_candidates(self):
        assert pick_best_candidate([]) is None


def day(key, usage=0, capacity=390, goal_ids=()):
    return SimpleNamespace(key=key, usage=usage, capacity=capacity, goal_ids=set(goal_ids))


class TestDayOrdering:

    def test_unused_days_first(self):
        days = [day("2024-01-22", goal_ids={"g"}), day("2024-01-23")]
        assert [d.key for d in order_days_for_goal(days, "g", set())] == ["2024-01-23", "2024-01-22"]

    def test_ideal_days_before_others(self):
        days = [day("2024-01-22"), day("2024-01-23")]
        assert [d.key for d in order_days_for_goal(days, "g", {"2024-01-23"})] == ["2024-01-23", "2024-01-22"]

    def test_lower_utilization_first(self):
        days = [day("2024-01-22", usage=200), day("2024-01-23", usage=30)]
        assert [d.key for d in order_days_for_goal(days, "g", set())] == ["2024-01-23", "2024-01-22"]

    def test_utilization_within_tolerance_falls_back_to_key(self):
        days = [day("2024-01-23", usage=30), day("2024-01-22", usage=60)]
        assert [d.key for d in order_days_for_goal(days, "g", set())] == ["2024-01-22", "2024-01-23"]

    def test_day_without_capacity_counts_as_full(self):
        assert calculate_utilization(day("2024-01-22", capacity=0)) == 1.0
