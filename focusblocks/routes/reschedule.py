"""
Reschedule sanitization endpoints
"""

from fastapi import APIRouter, HTTPException

from ..schemas import SanitizeRequest, SanitizeResult
from ..scheduling.core.errors import SchedulingError
from ..services.scheduler_service import scheduler_service

router = APIRouter()


@router.post("/sanitize", response_model=SanitizeResult, response_model_by_alias=True)
def sanitize_operations(request: SanitizeRequest):
    """Validate and repair assistant-proposed move/create/delete operations."""
    try:
        return scheduler_service.sanitize_operations(
            operations=request.operations,
            settings=request.settings,
            existing_blocks=request.existing_blocks,
            now=request.now,
        )
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))
