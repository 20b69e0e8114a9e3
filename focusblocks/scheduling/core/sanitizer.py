"""
Operation sanitizer: turns reschedule operations proposed by an assistant
into operations that are safe to apply.

Every move/create comes out with absolute instants that are in the future,
inside the working window of an enabled day, and off existing blocks and
events. Operations in the same batch are then pushed apart. A single bad
operation is dropped with a reason, never the whole batch.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Dict, List, Mapping, Optional, Sequence, Set

import pytz

from .clock import TimezoneClock, format_instant, to_utc, weekday_name
from .errors import UnresolvableInstant
from .time_slot import TimeSlot
from ..algorithms.displacement import find_next_available_start, reconcile_day
from ..constraints.time_constraints import bounds_for
from ..utils.date_resolution import parse_instant, resolve_future_instant
from ...config import DEFAULT_RESCHEDULE_HOUR
from ...schemas import (
    DroppedOperation,
    OperationKind,
    RescheduleOperation,
    SanitizedOperation,
    SanitizeFlag,
    SanitizeResult,
)

logger = logging.getLogger(__name__)


def clamp_to_window(instant: datetime, window: TimeSlot) -> datetime:
    """Before the window -> window start, at or after its end -> window end."""
    if instant < window.start:
        return window.start
    if instant >= window.end:
        return window.end
    return instant


class _Placement:
    """A move/create being sanitized: where it currently sits and the day it belongs to."""

    def __init__(self, operation: SanitizedOperation, start: datetime, end: datetime, bounds: TimeSlot, day_key: str):
        self.operation = operation
        self.start = start
        self.end = end
        self.bounds = bounds
        self.day_key = day_key


class OperationSanitizer:
    """
    Sanitizes one batch of reschedule operations against a snapshot of the
    user's calendar.

    `existing_busy` holds TimeSlots whose occupant is the block id for focus
    blocks and BUSY for every other event.
    """

    def __init__(self, working_window: Mapping, timezone: str, block_length_minutes: int, min_gap_minutes: int,
                 existing_busy: Sequence[TimeSlot] = (), now: Optional[datetime] = None,
                 default_hour: int = DEFAULT_RESCHEDULE_HOUR):
        self.working_window = working_window
        self.clock = TimezoneClock(timezone)
        self.block_length_minutes = block_length_minutes
        self.min_gap_minutes = min_gap_minutes
        self.existing_busy = tuple(
            TimeSlot(to_utc(slot.start), to_utc(slot.end), slot.occupant) for slot in existing_busy
        )
        self.now = to_utc(now) if now is not None else datetime.now(pytz.utc)
        self.default_time = time(default_hour, 0)

    def sanitize(self, operations: Sequence[RescheduleOperation]) -> SanitizeResult:
        # Blocks being moved or deleted no longer hold their old position
        released: Set[str] = {
            operation.block_id for operation in operations
            if operation.kind in (OperationKind.MOVE, OperationKind.DELETE) and operation.block_id
        }
        occupied = [slot for slot in self.existing_busy if slot.occupant not in released]

        sanitized: List[SanitizedOperation] = []
        placements: List[_Placement] = []
        dropped: List[DroppedOperation] = []

        for operation in operations:
            try:
                result, placement = self._sanitize_operation(operation, occupied)
            except UnresolvableInstant as e:
                dropped.append(self._drop(operation, f"{e.reason}: {e.value!r}"))
                continue

            if result is None:
                dropped.append(self._drop(operation, placement))
                continue

            sanitized.append(result)
            if placement is not None:
                placements.append(placement)

        self._reconcile(placements, occupied)

        logger.info(f"Sanitized {len(sanitized)} operation(s), dropped {len(dropped)}")
        return SanitizeResult(operations=sanitized, dropped=dropped)

    def _sanitize_operation(self, operation: RescheduleOperation, occupied: Sequence[TimeSlot]):
        """
        Returns (sanitized operation, placement). A None operation means the
        operation is dropped and the second item is the reason.
        """
        if operation.kind == OperationKind.DELETE:
            if not operation.block_id:
                return None, "delete requires blockId"
            return SanitizedOperation(**operation.model_dump()), None

        if operation.kind == OperationKind.MOVE:
            if not operation.block_id or not operation.to:
                return None, "move requires blockId and to"
            return self._sanitize_move(operation, occupied)

        if not operation.start or not operation.end:
            return None, "create requires start and end"
        return self._sanitize_create(operation, occupied)

    # ================================
    # PER-OPERATION RULES
    # ================================

    def _sanitize_move(self, operation: RescheduleOperation, occupied: Sequence[TimeSlot]):
        warnings: List[str] = []
        previous_start = None
        if operation.from_:
            previous_start = parse_instant(operation.from_, self.clock)
            if previous_start is None:
                warnings.append(f"Could not parse previous time {operation.from_!r}")

        target = resolve_future_instant(operation.to, self.clock, self.now, self.default_time, align_with=previous_start)
        duration = self._known_duration(operation.block_id)

        start, end, flags, bounds, day_key = self._place(target, duration, occupied, warnings)
        if start <= self.now:
            return None, f"{format_instant(start)} is not in the future after clamping"

        result = SanitizedOperation(
            **operation.model_dump(exclude={"to"}),
            to=format_instant(start),
            flags=flags,
            warnings=warnings,
        )
        return result, _Placement(result, start, end, bounds, day_key)

    def _sanitize_create(self, operation: RescheduleOperation, occupied: Sequence[TimeSlot]):
        warnings: List[str] = []
        requested_start = resolve_future_instant(operation.start, self.clock, self.now, self.default_time)
        requested_end = resolve_future_instant(
            operation.end, self.clock, self.now, self.default_time, align_with=requested_start
        )

        duration = requested_end - requested_start
        if duration <= timedelta(0):
            warnings.append(f"End {operation.end!r} is not after start; using a {self.block_length_minutes} minute block")
            duration = timedelta(minutes=self.block_length_minutes)

        start, end, flags, bounds, day_key = self._place(requested_start, duration, occupied, warnings, fit_end=True)
        if start <= self.now:
            return None, f"{format_instant(start)} is not in the future after clamping"

        result = SanitizedOperation(
            **operation.model_dump(exclude={"start", "end"}),
            start=format_instant(start),
            end=format_instant(end),
            flags=flags,
            warnings=warnings,
        )
        return result, _Placement(result, start, end, bounds, day_key)

    def _place(self, requested: datetime, duration: timedelta, occupied: Sequence[TimeSlot], warnings: List[str],
               fit_end: bool = False):
        """
        Clamp a requested start into its day and search for free room.
        With fit_end the end is clamped to the window as well, pulling the
        start back when the block would otherwise collapse.
        Returns (start, end, flags, bounds, day key).
        """
        flags: List[SanitizeFlag] = []
        day = self.clock.local_date(requested)
        bounds, is_working_window = bounds_for(day, self.working_window, self.clock)

        start = requested
        end = requested + duration
        if is_working_window:
            start = clamp_to_window(requested, bounds)
            end = start + duration
            if fit_end and end > bounds.end:
                end = bounds.end
                if end <= start:
                    # Pull back so the whole block fits before the window closes
                    start = bounds.end - duration
            if start != requested or end != requested + duration:
                flags.append(SanitizeFlag.CLAMPED)
        else:
            flags.append(SanitizeFlag.OUTSIDE_WORKING_WINDOW)
            warnings.append(f"{weekday_name(day).capitalize()} is not a working day; confirm before applying")

        whole_day = TimeSlot(self.clock.start_of_day(day), self.clock.end_of_day(day))
        day_occupied = [slot for slot in occupied if slot.overlaps(whole_day)]
        length = end - start
        # Off a working window, only look later the same day
        available = find_next_available_start(
            start, length, day_occupied, bounds, self.min_gap_minutes, self.now, forward_only=not is_working_window
        )
        if available is None:
            flags.append(SanitizeFlag.NO_AVAILABLE_SLOT)
            warnings.append(f"No free slot found on {day.isoformat()}; keeping {format_instant(start)}")
            logger.warning(f"No available slot on {day.isoformat()} for a {int(length.total_seconds() // 60)} minute block")
        elif available != start:
            flags.append(SanitizeFlag.RELOCATED)
            start = available
            end = available + length

        return start, end, flags, bounds, day.isoformat()

    def _known_duration(self, block_id: Optional[str]) -> timedelta:
        for slot in self.existing_busy:
            if slot.occupant == block_id:
                return slot.duration()
        return timedelta(minutes=self.block_length_minutes)

    # ================================
    # BATCH RECONCILIATION
    # ================================

    def _reconcile(self, placements: List[_Placement], occupied: Sequence[TimeSlot]):
        """Push operations that landed on the same day clear of each other."""
        by_day: Dict[str, List[_Placement]] = {}
        for placement in placements:
            by_day.setdefault(placement.day_key, []).append(placement)

        for day_key, day_placements in by_day.items():
            if len(day_placements) < 2:
                continue

            bounds = day_placements[0].bounds
            entries = [TimeSlot(item.start, item.end, index) for index, item in enumerate(day_placements)]
            adjusted, unresolved = reconcile_day(entries, bounds, occupied, self.min_gap_minutes)

            for slot in adjusted:
                placement = day_placements[slot.occupant]
                if slot.start != placement.start:
                    self._apply_push(placement, slot.start, slot.end)

            for index in unresolved:
                operation = day_placements[index].operation
                operation.flags.append(SanitizeFlag.UNRESOLVABLE_COLLISION)
                operation.warnings.append(f"Overlaps another operation on {day_key}; could not push it within the day")

    @staticmethod
    def _apply_push(placement: _Placement, start: datetime, end: datetime):
        placement.start, placement.end = start, end
        operation = placement.operation
        if operation.kind == OperationKind.MOVE:
            operation.to = format_instant(start)
        else:
            operation.start = format_instant(start)
            operation.end = format_instant(end)
        if SanitizeFlag.RELOCATED not in operation.flags:
            operation.flags.append(SanitizeFlag.RELOCATED)

    @staticmethod
    def _drop(operation: RescheduleOperation, reason: str) -> DroppedOperation:
        logger.warning(
            f"Dropping {operation.kind.value} operation "
            f"(block={operation.block_id}, goal={operation.goal_name}): {reason}"
        )
        return DroppedOperation(kind=operation.kind, block_id=operation.block_id, goal_name=operation.goal_name, reason=reason)
