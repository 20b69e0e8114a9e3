"""
Displacement of a single block off occupied time, and reconciliation of a
batch of blocks that landed on the same day.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from ..core.time_slot import TimeSlot
from ..utils.slot_utils import has_conflict

logger = logging.getLogger(__name__)


def _fits(candidate: TimeSlot, bounds: TimeSlot, occupied: Sequence[TimeSlot], gap_minutes: int, now: datetime) -> bool:
    return (
        candidate.start > now
        and bounds.contains(candidate)
        and not has_conflict(candidate, occupied, gap_minutes)
    )


def find_next_available_start(start: datetime, duration: timedelta, occupied: Sequence[TimeSlot],
                              bounds: TimeSlot, gap_minutes: int, now: datetime,
                              forward_only: bool = False) -> Optional[datetime]:
    """
    First start, at or after the bound's start, where a block of `duration`
    fits inside `bounds` without touching occupied time.

    `start` itself wins when it is free. Otherwise the candidates are the
    bound's start, the gap-padded end of every occupied range and `start`,
    in ascending order. With forward_only the search starts at `start` and
    the bound's start is not offered. Returns None when none of them fits.
    """
    if _fits(TimeSlot(start, start + duration), bounds, occupied, gap_minutes, now):
        return start

    gap = timedelta(minutes=gap_minutes)
    earliest = start if forward_only else bounds.start
    candidates = {earliest, start}
    candidates.update(slot.end + gap for slot in occupied)

    for candidate_start in sorted(candidates):
        if candidate_start < earliest:
            continue
        if _fits(TimeSlot(candidate_start, candidate_start + duration), bounds, occupied, gap_minutes, now):
            return candidate_start
    return None


def push_past_occupied(slot: TimeSlot, earliest: datetime, occupied: Sequence[TimeSlot], gap_minutes: int) -> TimeSlot:
    """Move `slot` to start no earlier than `earliest`, then past every occupied range it hits."""
    duration = slot.duration()
    gap = timedelta(minutes=gap_minutes)
    start = max(slot.start, earliest)

    moved = True
    while moved:
        moved = False
        candidate = TimeSlot(start, start + duration)
        for busy in occupied:
            if candidate.overlaps(busy, gap_minutes):
                start = busy.end + gap
                moved = True
                break

    return TimeSlot(start, start + duration, slot.occupant)


def reconcile_day(entries: Sequence[TimeSlot], bounds: TimeSlot, occupied: Sequence[TimeSlot],
                  gap_minutes: int) -> Tuple[List[TimeSlot], list]:
    """
    Walk one day's entries in start order and push each one clear of the
    entry before it.

    An entry that would no longer fit inside `bounds` keeps its position and
    its occupant is reported as unresolved; the overlap is left in place.
    Returns the adjusted entries and the unresolved occupants.
    """
    gap = timedelta(minutes=gap_minutes)
    adjusted: List[TimeSlot] = []
    unresolved = []
    previous: Optional[TimeSlot] = None

    for entry in sorted(entries, key=lambda slot: slot.start):
        current = entry
        if previous is not None and current.start < previous.end + gap:
            pushed = push_past_occupied(current, previous.end + gap, occupied, gap_minutes)
            if pushed.end <= bounds.end:
                current = pushed
            else:
                logger.warning(
                    f"Could not push {entry.occupant} clear of {previous.occupant} "
                    f"before {bounds.end.isoformat()}; keeping the overlap"
                )
                unresolved.append(entry.occupant)

        adjusted.append(current)
        if previous is None or current.end > previous.end:
            previous = current

    return adjusted, unresolved
