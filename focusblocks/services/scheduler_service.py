"""
Service entry points used by the routes: schedule generation and
reschedule sanitization.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..config import CANDIDATE_STEP_MINUTES, FETCH_CHUNK_SIZE
from ..schemas import (
    CalendarEvent,
    Goal,
    GoalShortfall,
    ProposedBlock,
    RescheduleOperation,
    SanitizeResult,
    ScheduleResult,
    Settings,
)
from ..scheduling.core.clock import TimezoneClock
from ..scheduling.core.errors import MissingSettings
from ..scheduling.core.sanitizer import OperationSanitizer
from ..scheduling.core.scheduler import FocusBlockScheduler
from .calendar_events import event_to_slot, week_range

logger = logging.getLogger(__name__)


class SchedulerService:
    """Stateless wrapper that validates settings and builds an engine per call."""

    def __init__(self, step_minutes: int = CANDIDATE_STEP_MINUTES, chunk_size: int = FETCH_CHUNK_SIZE):
        self.step_minutes = step_minutes
        self.chunk_size = chunk_size

    def _require_settings(self, settings: Optional[Settings]) -> Settings:
        if settings is None:
            raise MissingSettings()
        if not any(window.enabled for window in settings.working_window.values()):
            raise MissingSettings("No working days are enabled. Please configure your working hours first.")
        return settings

    def generate_schedule(self, goals: Sequence[Goal], settings: Optional[Settings], busy_events: Iterable[CalendarEvent],
                          week_start: Optional[datetime] = None, week_end: Optional[datetime] = None) -> ScheduleResult:
        """Propose focus blocks for the week; existing focus blocks in the calendar are ignored."""
        settings = self._require_settings(settings)
        clock = TimezoneClock(settings.timezone)

        if week_start is None or week_end is None:
            default_start, default_end = week_range(clock, week_start)
            week_start = week_start or default_start
            week_end = week_end or default_end

        busy_slots = [event_to_slot(event) for event in busy_events if not event.is_focus_block]

        scheduler = FocusBlockScheduler(
            working_window=settings.working_window,
            timezone=settings.timezone,
            block_length_minutes=settings.block_length_minutes,
            min_gap_minutes=settings.min_gap_minutes,
            step_minutes=self.step_minutes,
        )
        result = scheduler.place_blocks(list(goals), busy_slots, week_start, week_end)

        shortfall = None
        if result.get("shortfall"):
            shortfall = [GoalShortfall(**item) for item in result["shortfall"]]

        return ScheduleResult(
            blocks=[ProposedBlock(**block) for block in result["blocks"]],
            available_minutes=result["available_minutes"],
            requested_minutes=result["requested_minutes"],
            shortfall=shortfall,
        )

    def sanitize_operations(self, operations: Sequence[RescheduleOperation], settings: Optional[Settings],
                            existing_blocks: Iterable[CalendarEvent], now: Optional[datetime] = None) -> SanitizeResult:
        """Make proposed reschedule operations safe to apply against the current calendar."""
        settings = self._require_settings(settings)
        sanitizer = OperationSanitizer(
            working_window=settings.working_window,
            timezone=settings.timezone,
            block_length_minutes=settings.block_length_minutes,
            min_gap_minutes=settings.min_gap_minutes,
            existing_busy=[event_to_slot(event) for event in existing_blocks],
            now=now,
        )
        return sanitizer.sanitize(list(operations))

    def load_existing_blocks(self, block_ids: Sequence[str],
                             fetch_blocks: Callable[[List[str]], Iterable[CalendarEvent]]) -> Tuple[CalendarEvent, ...]:
        """
        Fetch the blocks an operation batch refers to, at most chunk_size ids
        per call. The result is a snapshot for the rest of the request.
        """
        unique_ids = list(dict.fromkeys(block_id for block_id in block_ids if block_id))
        blocks: List[CalendarEvent] = []
        for offset in range(0, len(unique_ids), self.chunk_size):
            chunk = unique_ids[offset:offset + self.chunk_size]
            fetched = list(fetch_blocks(chunk))
            logger.debug(f"Fetched {len(fetched)} block(s) for {len(chunk)} id(s)")
            blocks.extend(fetched)
        return tuple(blocks)


# Global scheduler service instance
scheduler_service = SchedulerService()
