"""
Focus Block Scheduling System

Places weekly goal sessions into free calendar time and repairs
reschedule operations so they stay in the future, inside working hours
and off existing blocks.
"""

from .core.scheduler import FocusBlockScheduler
from .core.sanitizer import OperationSanitizer
from .core.clock import TimezoneClock, WallClockTime
from .core.time_slot import TimeSlot
from .core.constants import AVAILABLE, BUSY
from .core.errors import SchedulingError, InvalidTimezone, MissingSettings, UnresolvableInstant

# Version for future API compatibility
__version__ = "1.0.0"
