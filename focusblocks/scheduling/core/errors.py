"""
Error kinds raised by the scheduling engine.

Only fatal problems are raised out of a call. Per-item problems
(an operation whose time cannot be resolved, a goal that does not fit,
a collision that cannot be pushed clear) are reported on the result.
"""


class SchedulingError(Exception):
    """Base class for scheduling engine errors."""


class InvalidTimezone(SchedulingError):
    def __init__(self, timezone_name):
        self.timezone_name = timezone_name
        super().__init__(f"Unknown timezone: {timezone_name!r}")


class MissingSettings(SchedulingError):
    def __init__(self, message: str = "Settings not found. Please configure your working hours first."):
        super().__init__(message)


class UnresolvableInstant(SchedulingError):
    """A single operation's time could not be parsed or is not in the future."""

    def __init__(self, value, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot resolve {value!r}: {reason}")
