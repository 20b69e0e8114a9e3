"""
Schedule generation endpoints
"""

from fastapi import APIRouter, HTTPException

from ..schemas import GenerateScheduleRequest, ScheduleResult
from ..scheduling.core.errors import SchedulingError
from ..services.scheduler_service import scheduler_service

router = APIRouter()


@router.post("/generate", response_model=ScheduleResult, response_model_by_alias=True)
def generate_schedule(request: GenerateScheduleRequest):
    """
    Propose focus blocks for the requested week.
    Nothing is written anywhere; the caller applies the blocks it accepts.
    """
    try:
        return scheduler_service.generate_schedule(
            goals=request.goals,
            settings=request.settings,
            busy_events=request.busy_events,
            week_start=request.week_start,
            week_end=request.week_end,
        )
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))
