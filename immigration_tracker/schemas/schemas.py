"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class ImmigrationStatus(str, Enum):
    # F-1 student phase
    f1_student = "F1_STUDENT"
    graduated = "GRADUATED"

    # OPT phase
    opt_not_applied = "OPT_NOT_APPLIED"
    opt_pending = "OPT_PENDING"
    opt_approved = "OPT_APPROVED"
    ead_received = "EAD_RECEIVED"

    # Employment phase
    job_searching = "JOB_SEARCHING"
    job_offer_received = "JOB_OFFER_RECEIVED"
    employed = "EMPLOYED"

    # STEM OPT extension phase
    stem_opt_eligible = "STEM_OPT_ELIGIBLE"
    stem_opt_pending = "STEM_OPT_PENDING"
    stem_opt_approved = "STEM_OPT_APPROVED"

    # H1B phase
    h1b_preparing = "H1B_PREPARING"
    h1b_registered = "H1B_REGISTERED"
    h1b_selected = "H1B_SELECTED"
    h1b_petition_filed = "H1B_PETITION_FILED"
    h1b_approved = "H1B_APPROVED"
    h1b_active = "H1B_ACTIVE"

    # Alternative / end states
    h1b_not_selected = "H1B_NOT_SELECTED"
    status_expired = "STATUS_EXPIRED"
    other = "OTHER"


class ImmigrationPhase(str, Enum):
    student = "STUDENT"
    opt = "OPT"
    employment = "EMPLOYMENT"
    stem_opt = "STEM_OPT"
    h1b = "H1B"
    other = "OTHER"


class Priority(str, Enum):
    critical = "CRITICAL"
    high = "HIGH"
    medium = "MEDIUM"
    low = "LOW"


class DeadlineCategory(str, Enum):
    application = "APPLICATION"
    registration = "REGISTRATION"
    reporting = "REPORTING"
    renewal = "RENEWAL"
    response = "RESPONSE"


# ============================================================
# DEADLINE SCHEMAS
# ============================================================

class DateRange(BaseModel):
    start: date
    end: date


class Deadline(BaseModel):
    title: str
    description: str
    due_date: date
    priority: Priority
    category: DeadlineCategory
    completed: bool = False
    reminder_days: List[int] = Field(default_factory=list)
    associated_form: Optional[str] = None


class OptDeadlinesResponse(BaseModel):
    program_end_date: date
    application_window: DateRange
    deadlines: List[Deadline]


# ============================================================
# CONFIGURATION SCHEMAS
# ============================================================

class ProfileReportResponse(BaseModel):
    report: str
    active_profiles: List[str]
    registered_profiles: List[str]
    database: Optional[str] = None
    engine: Optional[str] = None


class DatabaseBindingResponse(BaseModel):
    profile: str
    engine: str
    description: str


class HealthResponse(BaseModel):
    status: str
    profiles: str
    database: str


# ============================================================
# STATUS SCHEMAS
# ============================================================

class TransitionValidation(BaseModel):
    valid: bool
    error: Optional[str] = None


class TransitionSuggestion(BaseModel):
    status: ImmigrationStatus
    reason: str
    priority: str


class StatusResponse(BaseModel):
    status: ImmigrationStatus
    phase: ImmigrationPhase
    can_work: bool
    requires_immediate_action: bool
    is_terminal: bool
    recommended_next: Optional[ImmigrationStatus] = None
    suggestions: List[TransitionSuggestion]
