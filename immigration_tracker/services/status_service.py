"""
Status Service - visa status transitions.

PURPOSE:
Track where a student is in the F-1 -> OPT -> STEM OPT -> H1B journey
and which moves from the current status are allowed.

RULES:
- Staying in the same status is always allowed
- OTHER can move to any status (manual correction)
- A status is terminal when its only way out is OTHER
"""

from typing import Dict, List, Optional

from immigration_tracker.schemas.schemas import (
    ImmigrationPhase, ImmigrationStatus, StatusResponse,
    TransitionSuggestion, TransitionValidation
)

S = ImmigrationStatus


# ============================================================
# TRANSITION TABLE
# ============================================================

VALID_TRANSITIONS: Dict[ImmigrationStatus, List[ImmigrationStatus]] = {
    # F-1 student phase
    S.f1_student: [S.graduated, S.opt_not_applied, S.other],
    S.graduated: [S.opt_not_applied, S.opt_pending, S.other],

    # OPT phase
    S.opt_not_applied: [S.opt_pending, S.status_expired],
    S.opt_pending: [S.opt_approved, S.opt_not_applied, S.status_expired],  # denied -> reapply
    S.opt_approved: [S.ead_received],
    S.ead_received: [S.job_searching, S.job_offer_received, S.employed, S.stem_opt_eligible],

    # Employment phase
    S.job_searching: [S.job_offer_received, S.employed, S.status_expired],
    S.job_offer_received: [S.employed, S.job_searching],
    S.employed: [
        S.stem_opt_eligible, S.stem_opt_pending, S.h1b_preparing,
        S.h1b_registered, S.job_searching, S.status_expired,
    ],

    # STEM OPT phase
    S.stem_opt_eligible: [S.stem_opt_pending, S.employed, S.status_expired],
    S.stem_opt_pending: [S.stem_opt_approved, S.stem_opt_eligible, S.status_expired],
    S.stem_opt_approved: [S.employed, S.h1b_preparing, S.status_expired],

    # H1B phase
    S.h1b_preparing: [S.h1b_registered, S.employed],
    S.h1b_registered: [S.h1b_selected, S.h1b_not_selected],
    S.h1b_selected: [S.h1b_petition_filed],
    S.h1b_petition_filed: [S.h1b_approved, S.h1b_preparing, S.status_expired],
    S.h1b_approved: [S.h1b_active],
    S.h1b_active: [S.other],

    # Alternative / end states
    S.h1b_not_selected: [S.h1b_preparing, S.employed, S.status_expired],
    S.status_expired: [S.other],
    S.other: list(ImmigrationStatus),
}

RECOMMENDED_NEXT: Dict[ImmigrationStatus, ImmigrationStatus] = {
    S.f1_student: S.graduated,
    S.graduated: S.opt_pending,
    S.opt_not_applied: S.opt_pending,
    S.opt_pending: S.opt_approved,
    S.opt_approved: S.ead_received,
    S.ead_received: S.job_searching,
    S.job_searching: S.job_offer_received,
    S.job_offer_received: S.employed,
    S.employed: S.h1b_preparing,
    S.stem_opt_eligible: S.stem_opt_pending,
    S.stem_opt_pending: S.stem_opt_approved,
    S.stem_opt_approved: S.employed,
    S.h1b_preparing: S.h1b_registered,
    S.h1b_registered: S.h1b_selected,
    S.h1b_selected: S.h1b_petition_filed,
    S.h1b_petition_filed: S.h1b_approved,
    S.h1b_approved: S.h1b_active,
    S.h1b_not_selected: S.h1b_preparing,
    S.h1b_active: S.other,
    S.status_expired: S.other,
    S.other: S.f1_student,
}

STATUS_PHASE: Dict[ImmigrationStatus, ImmigrationPhase] = {
    S.f1_student: ImmigrationPhase.student,
    S.graduated: ImmigrationPhase.student,
    S.opt_not_applied: ImmigrationPhase.opt,
    S.opt_pending: ImmigrationPhase.opt,
    S.opt_approved: ImmigrationPhase.opt,
    S.ead_received: ImmigrationPhase.opt,
    S.job_searching: ImmigrationPhase.employment,
    S.job_offer_received: ImmigrationPhase.employment,
    S.employed: ImmigrationPhase.employment,
    S.stem_opt_eligible: ImmigrationPhase.stem_opt,
    S.stem_opt_pending: ImmigrationPhase.stem_opt,
    S.stem_opt_approved: ImmigrationPhase.stem_opt,
    S.h1b_preparing: ImmigrationPhase.h1b,
    S.h1b_registered: ImmigrationPhase.h1b,
    S.h1b_selected: ImmigrationPhase.h1b,
    S.h1b_petition_filed: ImmigrationPhase.h1b,
    S.h1b_approved: ImmigrationPhase.h1b,
    S.h1b_active: ImmigrationPhase.h1b,
    S.h1b_not_selected: ImmigrationPhase.h1b,
    S.status_expired: ImmigrationPhase.other,
    S.other: ImmigrationPhase.other,
}

URGENT_STATUSES = {S.opt_not_applied, S.graduated, S.status_expired, S.h1b_selected}

WORK_AUTHORIZED_STATUSES = {
    S.ead_received, S.job_searching, S.job_offer_received,
    S.employed, S.stem_opt_approved, S.h1b_active,
}

STEM_OPT_ELIGIBLE_STATUSES = {S.opt_approved, S.ead_received, S.employed}

H1B_ELIGIBLE_STATUSES = {S.employed, S.stem_opt_approved}

TYPICAL_PROGRESSION = [
    S.f1_student, S.graduated, S.opt_pending, S.opt_approved, S.ead_received,
    S.employed, S.h1b_preparing, S.h1b_registered, S.h1b_selected,
    S.h1b_petition_filed, S.h1b_approved, S.h1b_active,
]

SUGGESTION_REASONS = {
    S.opt_pending: "Submit OPT application to USCIS",
    S.ead_received: "EAD card has arrived",
    S.employed: "Started working with valid authorization",
    S.stem_opt_pending: "Apply for 24-month STEM extension",
    S.h1b_registered: "Employer registered for H1B lottery",
    S.h1b_active: "H1B status is now effective",
}


# ============================================================
# TRANSITIONS
# ============================================================

def get_next_statuses(current: ImmigrationStatus) -> List[ImmigrationStatus]:
    return list(VALID_TRANSITIONS.get(current, []))


def is_valid_transition(current: ImmigrationStatus, new: ImmigrationStatus) -> bool:
    if current == new:
        return True
    return new in VALID_TRANSITIONS.get(current, [])


def validate_transition(current: ImmigrationStatus, new: ImmigrationStatus) -> TransitionValidation:
    if is_valid_transition(current, new):
        return TransitionValidation(valid=True)
    return TransitionValidation(
        valid=False,
        error=f"Cannot transition from {current.value} to {new.value}. This transition is not allowed."
    )


def get_recommended_next_status(current: ImmigrationStatus) -> Optional[ImmigrationStatus]:
    """Most common next step, or None when no move is possible."""
    next_statuses = get_next_statuses(current)
    if not next_statuses:
        return None
    return RECOMMENDED_NEXT.get(current, next_statuses[0])


def get_transition_suggestions(current: ImmigrationStatus) -> List[TransitionSuggestion]:
    """Allowed next statuses, recommended one first."""
    recommended = get_recommended_next_status(current)
    suggestions = [
        TransitionSuggestion(
            status=status,
            reason=SUGGESTION_REASONS.get(status, "Next step in immigration process"),
            priority="high" if status == recommended else "medium",
        )
        for status in get_next_statuses(current)
    ]
    suggestions.sort(key=lambda s: s.priority != "high")
    return suggestions


def get_typical_progression_path(start: ImmigrationStatus) -> List[ImmigrationStatus]:
    if start == S.f1_student:
        return list(TYPICAL_PROGRESSION)
    return [start]


# ============================================================
# STATUS PREDICATES
# ============================================================

def get_phase(status: ImmigrationStatus) -> ImmigrationPhase:
    return STATUS_PHASE[status]


def is_in_phase(status: ImmigrationStatus, phase: ImmigrationPhase) -> bool:
    return get_phase(status) == phase


def is_terminal_status(status: ImmigrationStatus) -> bool:
    next_statuses = get_next_statuses(status)
    return not next_statuses or next_statuses == [S.other]


def requires_immediate_action(status: ImmigrationStatus) -> bool:
    return status in URGENT_STATUSES


def can_work(status: ImmigrationStatus) -> bool:
    return status in WORK_AUTHORIZED_STATUSES


def is_stem_opt_eligible(status: ImmigrationStatus, has_stem_degree: bool) -> bool:
    return has_stem_degree and status in STEM_OPT_ELIGIBLE_STATUSES


def is_h1b_eligible(status: ImmigrationStatus, has_job_offer: bool) -> bool:
    return has_job_offer and status in H1B_ELIGIBLE_STATUSES


def describe_status(status: ImmigrationStatus) -> StatusResponse:
    return StatusResponse(
        status=status,
        phase=get_phase(status),
        can_work=can_work(status),
        requires_immediate_action=requires_immediate_action(status),
        is_terminal=is_terminal_status(status),
        recommended_next=get_recommended_next_status(status),
        suggestions=get_transition_suggestions(status),
    )
