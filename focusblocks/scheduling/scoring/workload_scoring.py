"""
Workload-based ordering of days for a goal's next session.
"""

from functools import cmp_to_key
from typing import Iterable, List, Set
from ..core.constants import UTILIZATION_TOLERANCE


def calculate_utilization(day) -> float:
    """usage / capacity of a day plan. A day without capacity counts as full."""
    if day.capacity > 0:
        return day.usage / day.capacity
    return 1.0


def compare_days(a, b, goal_id: str, ideal: Set[str]) -> int:
    """
    Order two day plans for the next session of a goal:
    1. days the goal has not used yet
    2. ideal days
    3. lower utilization (within tolerance)
    4. day key
    """
    used_a = 1 if goal_id in a.goal_ids else 0
    used_b = 1 if goal_id in b.goal_ids else 0
    if used_a != used_b:
        return used_a - used_b

    ideal_a = 1 if a.key in ideal else 0
    ideal_b = 1 if b.key in ideal else 0
    if ideal_a != ideal_b:
        return ideal_b - ideal_a

    utilization_a = calculate_utilization(a)
    utilization_b = calculate_utilization(b)
    if abs(utilization_a - utilization_b) > UTILIZATION_TOLERANCE:
        return -1 if utilization_a < utilization_b else 1

    if a.key == b.key:
        return 0
    return -1 if a.key < b.key else 1


def order_days_for_goal(days: Iterable, goal_id: str, ideal: Set[str]) -> List:
    return sorted(days, key=cmp_to_key(lambda a, b: compare_days(a, b, goal_id, ideal)))
