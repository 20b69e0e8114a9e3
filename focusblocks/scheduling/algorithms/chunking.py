"""
Chunking a weekly goal into sessions and spreading them across the week.
"""

import math
from typing import List, Sequence, Set, Tuple


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def session_plan(target_minutes: int, sessions_per_week, block_length_minutes: int) -> Tuple[int, int]:
    """
    Return (session duration, session count) for a goal.

    With an explicit session count every session lasts target / sessions minutes.
    Otherwise the goal is cut into block-length sessions, the last one possibly shorter.
    """
    if sessions_per_week and sessions_per_week > 0:
        return round_half_up(target_minutes / sessions_per_week), sessions_per_week
    return block_length_minutes, math.ceil(target_minutes / block_length_minutes)


def next_session_minutes(session_minutes: int, remaining_minutes: int, has_fixed_sessions: bool) -> int:
    if has_fixed_sessions:
        return session_minutes
    return min(session_minutes, remaining_minutes)


def ideal_days(available_days: Sequence[str], sessions: int) -> Set[str]:
    """
    Pick the days a goal's sessions should ideally land on.

    Sessions are spaced evenly over the sorted available days instead of
    clustering at the start of the week.
    """
    ideal: Set[str] = set()
    if sessions <= 0 or not available_days:
        return ideal

    if sessions >= len(available_days):
        return set(available_days)

    for i in range(sessions):
        ideal.add(available_days[(i * len(available_days)) // sessions])
    return ideal


def sort_goals_for_placement(goals: List) -> List:
    """Goals with a preferred time get first pick, then the largest targets."""
    return sorted(goals, key=lambda goal: (goal.preferred_time is None, -goal.target_minutes_per_week))
