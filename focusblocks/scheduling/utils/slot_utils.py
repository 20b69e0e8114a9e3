"""
Interval arithmetic over time slots: free time, capacity and overlap checks.
"""

from datetime import timedelta
from typing import Iterable, List
from ..core.time_slot import TimeSlot, AVAILABLE


def compute_free_slots(window: TimeSlot, busy_slots: Iterable[TimeSlot], gap_minutes: int = 0) -> List[TimeSlot]:
    """
    Subtract busy slots from a window.

    The gap is kept clear before and after every busy slot, so two busy slots
    closer than 2 * gap leave no free time between them.
    """
    gap = timedelta(minutes=gap_minutes)
    free_slots = []
    cursor = window.start

    relevant = sorted(
        (busy for busy in busy_slots if busy.end > window.start and busy.start < window.end),
        key=lambda busy: busy.start,
    )

    for busy in relevant:
        if cursor < busy.start:
            free_end = busy.start - gap
            if free_end > cursor:
                free_slots.append(TimeSlot(cursor, free_end, AVAILABLE))
        after_busy = busy.end + gap
        if after_busy > cursor:
            cursor = after_busy

    if cursor < window.end:
        free_slots.append(TimeSlot(cursor, window.end, AVAILABLE))

    return free_slots


def effective_capacity_minutes(free_slots: Iterable[TimeSlot], block_length_minutes: int, gap_minutes: int) -> int:
    """Minutes of whole blocks that fit, counting the gap between consecutive blocks."""
    capacity = 0
    block_with_gap = block_length_minutes + gap_minutes
    for slot in free_slots:
        slot_minutes = slot.duration_minutes()
        if slot_minutes >= block_length_minutes:
            block_count = int((slot_minutes + gap_minutes) // block_with_gap)
            capacity += block_count * block_length_minutes
    return capacity


def has_conflict(candidate: TimeSlot, slots: Iterable[TimeSlot], gap_minutes: int = 0) -> bool:
    """Check a candidate against every slot, keeping the gap on both sides."""
    for slot in slots:
        if candidate.overlaps(slot, gap_minutes):
            return True
    return False


def total_minutes(slots: Iterable[TimeSlot]) -> int:
    return int(sum(slot.duration_minutes() for slot in slots))
