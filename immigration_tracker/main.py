"""
Immigration Tracker - Main Application

FastAPI backend for international students on F-1 / OPT / H1B:
- Deployment profiles select the database (dev: SQLite, prod: PostgreSQL,
  test: SQLite in-memory)
- Deadline calculations for OPT, STEM OPT and H1B

Run: PROFILES_ACTIVE=dev uvicorn immigration_tracker.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from immigration_tracker.api.routes import api_router
from immigration_tracker.core.config import get_settings
from immigration_tracker.core.exceptions import UnknownProfileError
from immigration_tracker.core.profiles import get_resolver
from immigration_tracker.db.database import get_engine, reset_engine, test_database_connection
from immigration_tracker.schemas.schemas import HealthResponse

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Immigration Tracker",
    description="""
    Deadline tracking and compliance for international students.

    ## Features
    - **Configuration**: Active deployment profile and database selection
    - **Deadlines**: OPT application window, grace period, H1B cap dates

    ## Databases
    - dev: SQLite file database
    - prod: PostgreSQL
    - test: SQLite in-memory
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Resolve deployment profiles and bind the database on startup."""
    resolver = get_resolver()
    logger.info(resolver.resolve_active_profiles())
    try:
        get_engine()
    except UnknownProfileError as e:
        logger.error("Database not configured: %s", e)


@app.on_event("shutdown")
async def shutdown_event():
    reset_engine()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """Detailed health check."""
    resolver = get_resolver()
    try:
        database = "connected" if test_database_connection() else "disconnected"
    except UnknownProfileError:
        database = "unconfigured"

    return HealthResponse(
        status="healthy",
        profiles=resolver.resolve_active_profiles(),
        database=database
    )
