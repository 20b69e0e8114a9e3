"""
Tests for the calendar event adapter.
"""

import pytest
from dateutil.parser import isoparse
from pydantic import ValidationError

from focusblocks.schemas import CalendarEvent, ProposedBlock
from focusblocks.scheduling.core.time_slot import BUSY
from focusblocks.services.calendar_events import build_block_event, event_to_slot, parse_calendar_event, week_range

from tests.helpers import NEW_YORK, utc


class TestParseCalendarEvent:

    def test_timed_focus_block(self, clock):
        event = parse_calendar_event({
            "id": "evt1",
            "summary": "Focus Block: Reading",
            "description": "focusblock=true\ngoalId=g1\nblockId=b1",
            "start": {"dateTime": "2024-01-22T09:00:00-05:00"},
            "end": {"dateTime": "2024-01-22T09:30:00-05:00"},
        }, clock)
        assert event.is_focus_block is True
        assert (event.goal_id, event.block_id) == ("g1", "b1")
        assert (event.start, event.end) == (utc(2024, 1, 22, 14), utc(2024, 1, 22, 14, 30))

    def test_plain_event(self, clock):
        event = parse_calendar_event({
            "id": "evt2",
            "start": {"dateTime": "2024-01-22T15:00:00Z"},
            "end": {"dateTime": "2024-01-22T16:00:00Z"},
        }, clock)
        assert event.title == "Untitled"
        assert event.is_focus_block is False
        assert event.goal_id is None

    def test_all_day_event_spans_local_day(self, clock):
        event = parse_calendar_event({
            "id": "evt3",
            "summary": "Offsite",
            "start": {"date": "2024-01-27"},
            "end": {"date": "2024-01-28"},
        }, clock)
        assert (event.start, event.end) == (utc(2024, 1, 27, 5), utc(2024, 1, 28, 5))


def test_block_event_round_trips_metadata(clock):
    block = ProposedBlock(goal_id="g1", goal_name="Reading", start=utc(2024, 1, 22, 14), end=utc(2024, 1, 22, 14, 30), duration=30)

    payload = build_block_event(block, NEW_YORK)

    assert payload["summary"] == "Focus Block: Reading"
    assert payload["description"] == "focusblock=true\ngoalId=g1\nblockId=pending"
    assert payload["start"] == {"dateTime": "2024-01-22T09:00:00-05:00", "timeZone": NEW_YORK}

    event = parse_calendar_event(dict(payload, id="evt4"), clock)
    assert event.is_focus_block is True
    assert event.block_id == "pending"
    assert event.start == block.start


def test_event_to_slot():
    focus = CalendarEvent(start=utc(2024, 1, 22, 14), end=utc(2024, 1, 22, 15), is_focus_block=True, block_id="b1")
    other = CalendarEvent(start=utc(2024, 1, 22, 14), end=utc(2024, 1, 22, 15), block_id="b2")
    assert event_to_slot(focus).occupant == "b1"
    assert event_to_slot(other).occupant == BUSY


def test_week_range(clock):
    expected = (utc(2024, 1, 22, 5), utc(2024, 1, 29, 5))
    assert week_range(clock, utc(2024, 1, 24, 15)) == expected
    assert week_range(clock, utc(2024, 1, 28, 15)) == expected  # Sunday belongs to the week before


class TestCalendarEventInstants:

    def test_offset_normalized_to_utc(self):
        event = CalendarEvent(start=isoparse("2024-01-22T09:00:00-05:00"), end=isoparse("2024-01-22T09:30:00-05:00"))
        assert event.start == utc(2024, 1, 22, 14)
        assert event.end.utcoffset().total_seconds() == 0

    def test_naive_start_rejected(self):
        with pytest.raises(ValidationError):
            CalendarEvent(start=isoparse("2024-01-22T09:00:00"), end=utc(2024, 1, 22, 15))

    def test_naive_wire_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            CalendarEvent.model_validate({"start": "2024-01-22T14:00:00Z", "end": "2024-01-22T15:00:00"})
