"""
Constants shared by the scheduling engine.
"""

# Slot occupants
AVAILABLE = "AVAILABLE"
BUSY = "BUSY"

# Index 0 is Sunday, matching WallClockTime.weekday
DAY_NAMES = ['sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday']

# Candidate scan granularity inside a free slot
STEP_MINUTES = 15

# Candidate scores
BASE_SCORE = 100.0
PREFERRED_WINDOW_BONUS = 2000.0
OUTSIDE_PREFERRED_PENALTY = 500.0
MIDDAY_BONUS = 50.0
OFF_HOURS_PENALTY = 20.0

# Local hours used when a goal has no preferred window
MIDDAY_START_HOUR = 10
MIDDAY_END_HOUR = 16
EARLY_HOUR = 8
LATE_HOUR = 19

# Two days whose utilization differs by less than this are treated as equal
UTILIZATION_TOLERANCE = 0.1
