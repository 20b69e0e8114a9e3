import enum
import re
from datetime import datetime
from typing import Dict, List, Optional

import pytz
from pydantic import BaseModel, Field, field_validator, model_validator

from .config import DEFAULT_BLOCK_LENGTH_MINUTES, DEFAULT_MIN_GAP_MINUTES, DEFAULT_TIMEZONE

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class CamelModel(BaseModel):
    """Wire format is camelCase; Python code uses the snake_case field names."""

    class Config:
        populate_by_name = True


def _check_hhmm(value: str) -> str:
    if not HHMM_PATTERN.match(value):
        raise ValueError(f"expected a 24-hour HH:MM time, got {value!r}")
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        raise ValueError("timestamp must carry a UTC offset (e.g. Z or -05:00)")
    return value.astimezone(pytz.utc)


# ----------------- Settings Schemas ---------------------

class DayWindow(CamelModel):
    enabled: bool = False
    start: str = "09:00"
    end: str = "17:00"

    @field_validator("start", "end")
    @classmethod
    def validate_hhmm(cls, value: str) -> str:
        return _check_hhmm(value)

    @model_validator(mode="after")
    def validate_order(self):
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")
        return self


class Settings(CamelModel):
    working_window: Dict[str, DayWindow] = Field(alias="workingWindow")
    block_length_minutes: int = Field(DEFAULT_BLOCK_LENGTH_MINUTES, gt=0, alias="blockLengthMinutes")
    min_gap_minutes: int = Field(DEFAULT_MIN_GAP_MINUTES, ge=0, alias="minGapMinutes")
    timezone: str = DEFAULT_TIMEZONE

    @field_validator("working_window")
    @classmethod
    def lowercase_day_names(cls, value: Dict[str, DayWindow]) -> Dict[str, DayWindow]:
        return {day.lower(): window for day, window in value.items()}


# ----------------- Goal Schemas ---------------------

class PreferredTime(CamelModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_hhmm(cls, value: str) -> str:
        return _check_hhmm(value)

    @model_validator(mode="after")
    def validate_order(self):
        if self.start > self.end:
            raise ValueError(f"preferred time start {self.start} is after end {self.end}")
        return self


class Goal(CamelModel):
    id: str
    name: str
    target_minutes_per_week: int = Field(gt=0, alias="targetMinutesPerWeek")
    sessions_per_week: Optional[int] = Field(None, gt=0, alias="sessionsPerWeek")
    preferred_time: Optional[PreferredTime] = Field(None, alias="preferredTime")


# ----------------- Calendar Schemas ---------------------

class CalendarEvent(CamelModel):
    id: Optional[str] = None
    title: str = "Untitled"
    start: datetime
    end: datetime
    is_focus_block: bool = Field(False, alias="isFocusBlock")
    goal_id: Optional[str] = Field(None, alias="goalId")
    block_id: Optional[str] = Field(None, alias="blockId")

    @field_validator("start", "end")
    @classmethod
    def normalize_instant(cls, value: datetime) -> datetime:
        return _as_utc(value)


# ----------------- Schedule Schemas ---------------------

class ProposedBlock(CamelModel):
    goal_id: str = Field(alias="goalId")
    goal_name: str = Field(alias="goalName")
    start: datetime
    end: datetime
    duration: int  # minutes


class GoalShortfall(CamelModel):
    goal_id: str = Field(alias="goalId")
    name: str
    remaining_minutes: int = Field(alias="remainingMinutes")


class ScheduleResult(CamelModel):
    blocks: List[ProposedBlock] = []
    available_minutes: int = Field(0, alias="availableMinutes")
    requested_minutes: int = Field(0, alias="requestedMinutes")
    shortfall: Optional[List[GoalShortfall]] = None


class GenerateScheduleRequest(CamelModel):
    goals: List[Goal]
    settings: Optional[Settings] = None
    busy_events: List[CalendarEvent] = Field([], alias="busyEvents")
    week_start: Optional[datetime] = Field(None, alias="weekStart")
    week_end: Optional[datetime] = Field(None, alias="weekEnd")

    @field_validator("week_start", "week_end")
    @classmethod
    def normalize_instant(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


# ----------------- Reschedule Schemas ---------------------

class OperationKind(str, enum.Enum):
    MOVE = "move"
    CREATE = "create"
    DELETE = "delete"


class SanitizeFlag(str, enum.Enum):
    OUTSIDE_WORKING_WINDOW = "outside_working_window"
    CLAMPED = "clamped"
    RELOCATED = "relocated"
    NO_AVAILABLE_SLOT = "no_available_slot"
    UNRESOLVABLE_COLLISION = "unresolvable_collision"


class RescheduleOperation(CamelModel):
    kind: OperationKind = Field(alias="op")
    block_id: Optional[str] = Field(None, alias="blockId")
    goal_name: Optional[str] = Field(None, alias="goalName")
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None


class SanitizedOperation(RescheduleOperation):
    flags: List[SanitizeFlag] = []
    warnings: List[str] = []


class DroppedOperation(CamelModel):
    kind: OperationKind = Field(alias="op")
    block_id: Optional[str] = Field(None, alias="blockId")
    goal_name: Optional[str] = Field(None, alias="goalName")
    reason: str


class SanitizeResult(CamelModel):
    operations: List[SanitizedOperation] = []
    dropped: List[DroppedOperation] = []


class SanitizeRequest(CamelModel):
    operations: List[RescheduleOperation]
    settings: Optional[Settings] = None
    existing_blocks: List[CalendarEvent] = Field([], alias="existingBlocks")
    now: Optional[datetime] = None

    @field_validator("now")
    @classmethod
    def normalize_instant(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)
