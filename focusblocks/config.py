"""
Environment-driven configuration for the focus block scheduler.
"""

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "America/New_York")
DEFAULT_BLOCK_LENGTH_MINUTES = int(os.getenv("DEFAULT_BLOCK_LENGTH_MINUTES", "30"))
DEFAULT_MIN_GAP_MINUTES = int(os.getenv("DEFAULT_MIN_GAP_MINUTES", "5"))

# Hour used when a reschedule names only a weekday ("move it to friday")
DEFAULT_RESCHEDULE_HOUR = int(os.getenv("DEFAULT_RESCHEDULE_HOUR", "9"))

CANDIDATE_STEP_MINUTES = int(os.getenv("CANDIDATE_STEP_MINUTES", "15"))

# Backing stores limit batched id lookups
FETCH_CHUNK_SIZE = int(os.getenv("FETCH_CHUNK_SIZE", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_WORKING_WINDOW = {
    "monday": {"enabled": True, "start": "09:00", "end": "17:00"},
    "tuesday": {"enabled": True, "start": "09:00", "end": "17:00"},
    "wednesday": {"enabled": True, "start": "09:00", "end": "17:00"},
    "thursday": {"enabled": True, "start": "09:00", "end": "17:00"},
    "friday": {"enabled": True, "start": "09:00", "end": "17:00"},
    "saturday": {"enabled": False, "start": "09:00", "end": "17:00"},
    "sunday": {"enabled": False, "start": "09:00", "end": "17:00"},
}
