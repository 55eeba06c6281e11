"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from immigration_tracker.api.routes.config_routes import router as config_router
from immigration_tracker.api.routes.deadline_routes import router as deadline_router
from immigration_tracker.api.routes.status_routes import router as status_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(config_router)
api_router.include_router(deadline_router)
api_router.include_router(status_router)
