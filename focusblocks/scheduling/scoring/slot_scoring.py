"""
Main slot scoring entry point used by the placement engine.
"""

from typing import List, Optional, Tuple
from ..core.clock import TimezoneClock
from ..core.time_slot import TimeSlot

from .time_scoring import calculate_time_preference_score


def calculate_slot_score(candidate: TimeSlot, preferred_window: Optional[TimeSlot], clock: TimezoneClock) -> float:
    """
    Calculate the score for one candidate block position.
    Pure function of the candidate, the goal's preferred window on that day
    and the user's timezone, so it can be tested without the placement loop.
    """
    return calculate_time_preference_score(candidate, preferred_window, clock.local_hour(candidate.start))


def pick_best_candidate(scored_candidates: List[Tuple[float, TimeSlot]]) -> Optional[TimeSlot]:
    """Highest score wins, ties go to the earliest start."""
    if not scored_candidates:
        return None
    _, best = max(scored_candidates, key=lambda item: (item[0], -item[1].start.timestamp()))
    return best
