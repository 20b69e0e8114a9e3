from datetime import datetime

import pytz

NEW_YORK = "America/New_York"


def utc(*args) -> datetime:
    """Aware UTC datetime from datetime() arguments."""
    return pytz.utc.localize(datetime(*args))
