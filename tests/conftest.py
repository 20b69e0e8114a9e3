"""
Shared fixtures: a New York clock and the default Mon-Fri 09:00-17:00 working window.

Dates used across the suite: the week of Monday 2024-01-22 (EST, UTC-5).
"""

import pytest

from focusblocks.config import DEFAULT_WORKING_WINDOW
from focusblocks.schemas import Settings
from focusblocks.scheduling.core.clock import TimezoneClock

from tests.helpers import NEW_YORK


@pytest.fixture
def clock():
    return TimezoneClock(NEW_YORK)


@pytest.fixture
def working_window():
    return {day: dict(config) for day, config in DEFAULT_WORKING_WINDOW.items()}


@pytest.fixture
def settings(working_window):
    return Settings(working_window=working_window, timezone=NEW_YORK, block_length_minutes=30, min_gap_minutes=5)
