"""
Time slot representation for the scheduling system.
"""

from datetime import datetime, timedelta
from typing import Any
from .constants import AVAILABLE, BUSY


class TimeSlot:
    """
    A half-open interval [start, end) of UTC instants.
    The occupant says what the slot represents:
    - Free time (occupant=AVAILABLE)
    - An external calendar event (occupant=BUSY)
    - A focus block (occupant=the block, or its id)
    """
    def __init__(self, start: datetime, end: datetime, occupant: Any = AVAILABLE):
        self.start = start
        self.end = end
        self.occupant = occupant

    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_minutes(self) -> float:
        return self.duration().total_seconds() / 60

    def overlaps(self, other: "TimeSlot", gap_minutes: int = 0) -> bool:
        """True when the two slots overlap, with `other` widened by the gap on both sides."""
        gap = timedelta(minutes=gap_minutes)
        return self.start < other.end + gap and self.end > other.start - gap

    def contains(self, other: "TimeSlot") -> bool:
        return self.start <= other.start and other.end <= self.end

    def __eq__(self, other):
        if not isinstance(other, TimeSlot):
            return NotImplemented
        return self.start == other.start and self.end == other.end and self.occupant == other.occupant

    def __lt__(self, other):
        return self.start < other.start

    def __repr__(self):
        if self.occupant == AVAILABLE:
            return f"AvailableSlot({self.start.isoformat()} - {self.end.isoformat()})"
        elif self.occupant == BUSY:
            return f"BusySlot({self.start.isoformat()} - {self.end.isoformat()})"
        else:
            return f"BlockSlot({self.start.isoformat()} - {self.end.isoformat()}, {self.occupant})"
