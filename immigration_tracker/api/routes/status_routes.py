"""
Status Routes

GET /status/{status} - Phase, work authorization and suggested next steps
GET /status/{status}/transitions/{new_status} - Check a status change
"""

from fastapi import APIRouter

from immigration_tracker.services import status_service
from immigration_tracker.schemas.schemas import ImmigrationStatus, StatusResponse, TransitionValidation

router = APIRouter(prefix="/status", tags=["Status"])


@router.get("/{status}", response_model=StatusResponse)
async def get_status(status: ImmigrationStatus):
    """Describe a visa status and the moves available from it."""
    return status_service.describe_status(status)


@router.get("/{status}/transitions/{new_status}", response_model=TransitionValidation)
async def check_transition(status: ImmigrationStatus, new_status: ImmigrationStatus):
    """Check whether moving from `status` to `new_status` is allowed."""
    return status_service.validate_transition(status, new_status)
