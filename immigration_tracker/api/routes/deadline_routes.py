"""
Deadline Routes

GET /deadlines/opt - OPT application deadlines for a program end date
GET /deadlines/h1b/{year} - H1B registration period and start date
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from immigration_tracker.core.config import Settings, get_settings
from immigration_tracker.services import deadline_service
from immigration_tracker.schemas.schemas import OptDeadlinesResponse

router = APIRouter(prefix="/deadlines", tags=["Deadlines"])


@router.get("/opt", response_model=OptDeadlinesResponse)
async def get_opt_deadlines(
    program_end_date: date = Query(..., description="Program end date from the I-20"),
    settings: Settings = Depends(get_settings)
):
    """
    Compute the post-completion OPT deadlines.

    Includes the application window and the grace period end,
    each with a priority based on how close it is.
    """
    return deadline_service.build_opt_deadlines(
        program_end_date,
        reminder_days=settings.get_reminder_days()
    )


@router.get("/h1b/{year}")
async def get_h1b_dates(year: int):
    """H1B cap registration period and employment start date for a fiscal cycle."""
    period = deadline_service.h1b_registration_period(year)
    return {
        "year": year,
        "registration_start": period.start,
        "registration_end": period.end,
        "employment_start": deadline_service.h1b_start_date(year)
    }
