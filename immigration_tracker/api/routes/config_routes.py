"""
Configuration Routes

GET /config/profiles - Active profiles and selected database
GET /config/bindings/{profile} - Database binding for a profile
"""

from fastapi import APIRouter, HTTPException, Depends

from immigration_tracker.core.exceptions import UnknownProfileError
from immigration_tracker.core.profiles import ConfigurationResolver, get_resolver
from immigration_tracker.schemas.schemas import ProfileReportResponse, DatabaseBindingResponse

router = APIRouter(prefix="/config", tags=["Configuration"])


@router.get("/profiles", response_model=ProfileReportResponse)
async def get_profiles(resolver: ConfigurationResolver = Depends(get_resolver)):
    """Report which deployment profiles are active and which database they select."""
    return ProfileReportResponse(**resolver.describe())


@router.get("/bindings/{profile}", response_model=DatabaseBindingResponse)
async def get_binding(profile: str, resolver: ConfigurationResolver = Depends(get_resolver)):
    """Get the database binding registered for a profile."""
    try:
        binding = resolver.require_binding(profile)
    except UnknownProfileError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return DatabaseBindingResponse(
        profile=binding.profile,
        engine=binding.engine.value,
        description=binding.description
    )
