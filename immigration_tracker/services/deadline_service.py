"""
Deadline Service - immigration date rules.

PURPOSE:
Turn a student's key dates (program end, OPT start/expiry, move date)
into the deadlines they have to meet.

TIMING RULES:
- OPT application window: 90 days before to 60 days after program end
- Grace period: 60 days after program end
- Unemployment limit: 90 days on OPT, 150 days including STEM OPT
- STEM OPT: apply at least 30 days before OPT expires
- STEM reporting: every 6 months of the STEM OPT period
- H1B registration: March 1-18, employment starts October 1
- Address change (AR-11): within 10 days of moving

Every function takes `today` so results are reproducible in tests.
"""

import calendar
from datetime import date, timedelta
from typing import List, Optional, Tuple

from immigration_tracker.schemas.schemas import (
    DateRange, Deadline, DeadlineCategory, OptDeadlinesResponse, Priority
)


OPT_WINDOW_BEFORE_DAYS = 90
OPT_WINDOW_AFTER_DAYS = 60
GRACE_PERIOD_DAYS = 60
OPT_UNEMPLOYMENT_DAYS = 90
STEM_OPT_UNEMPLOYMENT_DAYS = 150
STEM_OPT_LEAD_DAYS = 30
STEM_REPORTING_MONTHS = 6
ADDRESS_CHANGE_DAYS = 10
PREMIUM_PROCESSING_BUSINESS_DAYS = 15

DEFAULT_REMINDER_DAYS = [30, 14, 7, 3, 1]


# ============================================================
# DATE HELPERS
# ============================================================

def add_months(d: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def next_business_day(d: date) -> date:
    next_day = d + timedelta(days=1)
    while is_weekend(next_day):
        next_day += timedelta(days=1)
    return next_day


def add_business_days(d: date, business_days: int) -> date:
    result = d
    for _ in range(business_days):
        result = next_business_day(result)
    return result


def _today(today: Optional[date]) -> date:
    return today or date.today()


# ============================================================
# OPT / STEM OPT
# ============================================================

def opt_application_window(program_end_date: date) -> DateRange:
    return DateRange(
        start=program_end_date - timedelta(days=OPT_WINDOW_BEFORE_DAYS),
        end=program_end_date + timedelta(days=OPT_WINDOW_AFTER_DAYS),
    )


def grace_period_end(program_end_date: date) -> date:
    return program_end_date + timedelta(days=GRACE_PERIOD_DAYS)


def unemployment_limit(opt_start_date: date, stem_extension: bool = False) -> date:
    """Last day of allowed unemployment counted from the OPT start date."""
    days = STEM_OPT_UNEMPLOYMENT_DAYS if stem_extension else OPT_UNEMPLOYMENT_DAYS
    return opt_start_date + timedelta(days=days)


def stem_opt_deadline(opt_expiry_date: date) -> date:
    return opt_expiry_date - timedelta(days=STEM_OPT_LEAD_DAYS)


def stem_reporting_deadlines(stem_start_date: date, stem_end_date: date) -> List[date]:
    """Six-month validation reports due strictly before STEM OPT ends, counted from the start date."""
    deadlines = []
    step = 1
    current = add_months(stem_start_date, STEM_REPORTING_MONTHS)
    while current < stem_end_date:
        deadlines.append(current)
        step += 1
        current = add_months(stem_start_date, STEM_REPORTING_MONTHS * step)
    return deadlines


# ============================================================
# H1B
# ============================================================

def h1b_registration_period(year: int) -> DateRange:
    return DateRange(start=date(year, 3, 1), end=date(year, 3, 18))


def h1b_start_date(year: int) -> date:
    return date(year, 10, 1)


def cap_gap_period(opt_expiry_date: date, h1b_year: int) -> Optional[DateRange]:
    """Cap-gap coverage from OPT expiry to the H1B start, or None if not needed."""
    start = h1b_start_date(h1b_year)
    if opt_expiry_date < start:
        return DateRange(start=opt_expiry_date, end=start)
    return None


# ============================================================
# PROCESSING ESTIMATES
# ============================================================

def processing_estimate(submission_date: date, min_months: int, max_months: int) -> Tuple[date, date]:
    return add_months(submission_date, min_months), add_months(submission_date, max_months)


def opt_processing_estimate(application_date: date) -> Tuple[date, date]:
    return processing_estimate(application_date, 3, 5)


def h1b_processing_estimate(filing_date: date, premium: bool = False) -> Tuple[date, date]:
    if premium:
        decision = add_business_days(filing_date, PREMIUM_PROCESSING_BUSINESS_DAYS)
        return decision, decision
    return processing_estimate(filing_date, 3, 6)


# ============================================================
# URGENCY & REMINDERS
# ============================================================

def address_change_deadline(move_date: date) -> date:
    return move_date + timedelta(days=ADDRESS_CHANGE_DAYS)


def days_until(deadline: date, today: Optional[date] = None) -> int:
    """Days remaining until deadline (negative when overdue)."""
    return (deadline - _today(today)).days


def deadline_urgency(deadline: date, today: Optional[date] = None) -> Priority:
    """
    Map remaining days to a priority.

    Overdue or <= 3 days: CRITICAL, <= 7: HIGH, <= 30: MEDIUM, else LOW.
    """
    days = days_until(deadline, today)
    if days <= 3:
        return Priority.critical
    if days <= 7:
        return Priority.high
    if days <= 30:
        return Priority.medium
    return Priority.low


def is_within_warning_period(deadline: date, warning_days: int = 14, today: Optional[date] = None) -> bool:
    days = days_until(deadline, today)
    return 0 <= days <= warning_days


def notification_dates(deadline: date, days_before: List[int], today: Optional[date] = None) -> List[date]:
    """Reminder dates still in the future, earliest first."""
    current = _today(today)
    dates = [deadline - timedelta(days=days) for days in days_before]
    return sorted(d for d in dates if d > current)


def build_opt_deadlines(
    program_end_date: date,
    today: Optional[date] = None,
    reminder_days: Optional[List[int]] = None
) -> OptDeadlinesResponse:
    """
    Deadlines for a post-completion OPT application.

    Args:
        program_end_date: Program end date from the I-20
        today: Reference date for urgency (defaults to date.today())
        reminder_days: Days before each deadline to send reminders

    Returns:
        OptDeadlinesResponse with deadlines sorted by due date
    """
    reminders = reminder_days if reminder_days is not None else DEFAULT_REMINDER_DAYS
    window = opt_application_window(program_end_date)

    entries = [
        (
            "OPT application window opens",
            "Earliest date USCIS accepts a post-completion OPT application.",
            window.start,
            DeadlineCategory.application,
        ),
        (
            "OPT application deadline",
            "Form I-765 must be received within 60 days of the program end date.",
            window.end,
            DeadlineCategory.application,
        ),
        (
            "Grace period ends",
            "Last day to remain in the US without OPT or a change of status.",
            grace_period_end(program_end_date),
            DeadlineCategory.renewal,
        ),
    ]

    deadlines = [
        Deadline(
            title=title,
            description=description,
            due_date=due,
            priority=deadline_urgency(due, today),
            category=category,
            completed=False,
            reminder_days=list(reminders),
            associated_form="I-765" if category == DeadlineCategory.application else None,
        )
        for title, description, due, category in entries
    ]
    deadlines.sort(key=lambda d: d.due_date)

    return OptDeadlinesResponse(
        program_end_date=program_end_date,
        application_window=window,
        deadlines=deadlines,
    )
