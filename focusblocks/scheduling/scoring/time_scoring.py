"""
Time-based scoring functions for candidate block positions.
"""

from typing import Optional
from ..core.time_slot import TimeSlot
from ..core.constants import (
    BASE_SCORE, PREFERRED_WINDOW_BONUS, OUTSIDE_PREFERRED_PENALTY, MIDDAY_BONUS, OFF_HOURS_PENALTY,
    MIDDAY_START_HOUR, MIDDAY_END_HOUR, EARLY_HOUR, LATE_HOUR,
)


def calculate_preferred_window_score(candidate: TimeSlot, preferred_window: TimeSlot) -> float:
    """
    Big bonus when the candidate sits fully inside the goal's preferred window,
    big penalty otherwise. Dominates every other component.
    """
    if preferred_window.contains(candidate):
        return PREFERRED_WINDOW_BONUS
    return -OUTSIDE_PREFERRED_PENALTY


def calculate_time_of_day_score(local_start_hour: int) -> float:
    """
    Default preference for goals without a preferred window:
    favor the middle of the day, avoid early mornings and late evenings.
    """
    score = 0.0
    if MIDDAY_START_HOUR <= local_start_hour <= MIDDAY_END_HOUR:
        score += MIDDAY_BONUS
    if local_start_hour < EARLY_HOUR or local_start_hour > LATE_HOUR:
        score -= OFF_HOURS_PENALTY
    return score


def calculate_time_preference_score(candidate: TimeSlot, preferred_window: Optional[TimeSlot], local_start_hour: int) -> float:
    """Score a candidate position. Higher is better."""
    score = BASE_SCORE
    if preferred_window is not None:
        score += calculate_preferred_window_score(candidate, preferred_window)
    else:
        score += calculate_time_of_day_score(local_start_hour)
    return score
