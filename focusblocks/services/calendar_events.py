"""
Conversion between external calendar events and the scheduler's types.

Focus blocks written to the calendar carry their metadata in the event
description, one key=value per line:

    focusblock=true
    goalId=<goal id>
    blockId=<block id>
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from dateutil import parser as date_parser

from ..scheduling.core.clock import TimezoneClock, to_utc
from ..scheduling.core.time_slot import TimeSlot, BUSY
from ..schemas import CalendarEvent, ProposedBlock

FOCUS_BLOCK_MARKER = "focusblock=true"
GOAL_ID_PATTERN = re.compile(r"goalId=([^\n]+)")
BLOCK_ID_PATTERN = re.compile(r"blockId=([^\n]+)")


def _event_instant(value: dict, clock: TimezoneClock) -> datetime:
    """Start/end of an event: dateTime for timed events, date (local midnight) for all-day ones."""
    if value.get("dateTime"):
        parsed = date_parser.isoparse(value["dateTime"])
        if parsed.tzinfo is None:
            return clock.localize_naive(parsed)
        return to_utc(parsed)
    return clock.start_of_day(date.fromisoformat(value["date"]))


def parse_calendar_event(item: dict, clock: TimezoneClock) -> CalendarEvent:
    description = item.get("description") or ""
    goal_match = GOAL_ID_PATTERN.search(description)
    block_match = BLOCK_ID_PATTERN.search(description)

    return CalendarEvent(
        id=item.get("id"),
        title=item.get("summary") or "Untitled",
        start=_event_instant(item["start"], clock),
        end=_event_instant(item["end"], clock),
        is_focus_block=FOCUS_BLOCK_MARKER in description,
        goal_id=goal_match.group(1).strip() if goal_match else None,
        block_id=block_match.group(1).strip() if block_match else None,
    )


def build_block_event(block: ProposedBlock, timezone: str, block_id: str = "pending") -> dict:
    """Event payload for writing a proposed block to the calendar."""
    clock = TimezoneClock(timezone)
    return {
        "summary": f"Focus Block: {block.goal_name}",
        "description": f"{FOCUS_BLOCK_MARKER}\ngoalId={block.goal_id}\nblockId={block_id}",
        "start": {"dateTime": to_utc(block.start).astimezone(clock.tz).isoformat(), "timeZone": timezone},
        "end": {"dateTime": to_utc(block.end).astimezone(clock.tz).isoformat(), "timeZone": timezone},
    }


def event_to_slot(event: CalendarEvent) -> TimeSlot:
    """Focus blocks are keyed by block id so a batch can release them; everything else is plain busy time."""
    occupant = event.block_id if event.is_focus_block and event.block_id else BUSY
    return TimeSlot(event.start, event.end, occupant)


def week_range(clock: TimezoneClock, reference: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Monday 00:00 local of the reference's week, to the Monday after."""
    reference = reference or datetime.now(clock.tz)
    today = clock.local_date(reference)
    monday = today - timedelta(days=today.weekday())
    return clock.start_of_day(monday), clock.start_of_day(monday + timedelta(days=7))
