"""Business logic for fundraising projects.

Everything here is pure: operations take a snapshot and return a new one.
Persistence is the caller's concern.
"""

import math
from datetime import datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal

import structlog

from fundraising.core.errors import ValidationFailedError
from fundraising.models.base import new_id, utcnow
from fundraising.modules.projects.schemas import (
    FundingTotals,
    Project,
    ProjectForm,
    ProjectKPIs,
    ProjectUpdate,
    Timeframe,
)

logger = structlog.get_logger()

# Optional fields an explicit None clears; None elsewhere means "unchanged"
_CLEARABLE_FIELDS = frozenset({"minimum_investment"})

MAX_NAME_LENGTH = 255
MIN_PRECISION = 0
MAX_PRECISION = 10


# ── Validation ──────────────────────────────────────────────────────────────


def _check_name(value: str | None, label: str) -> str | None:
    if not value or not value.strip():
        return f"{label} is required"
    if len(value) > MAX_NAME_LENGTH:
        return f"{label} must be less than {MAX_NAME_LENGTH} characters"
    return None


def validate_project(form: ProjectForm) -> list[str]:
    """Every violated rule, in field order."""
    errors: list[str] = []

    for value, label in (
        (form.project_name, "Project name"),
        (form.legal_project_name, "Legal project name"),
    ):
        message = _check_name(value, label)
        if message:
            errors.append(message)

    if not form.target_amount or form.target_amount <= 0:
        errors.append("Target amount must be greater than 0")

    if form.minimum_investment is not None:
        if form.minimum_investment < 0:
            errors.append("Minimum investment must be a positive number")
        if form.target_amount and form.minimum_investment > form.target_amount:
            errors.append("Minimum investment cannot be greater than target amount")

    if not MIN_PRECISION <= form.unit_calculation_precision <= MAX_PRECISION:
        errors.append(
            f"Unit calculation precision must be between {MIN_PRECISION} and {MAX_PRECISION}"
        )

    if form.start_date is None:
        errors.append("Start date is required")
    if form.end_date is None:
        errors.append("End date is required")
    if form.start_date and form.end_date and form.start_date >= form.end_date:
        errors.append("End date must be after start date")

    return errors


def _check_totals(totals: FundingTotals, label: str) -> list[str]:
    errors = []
    if totals.total_amount < 0:
        errors.append(f"{label} amount must be a positive number")
    count = totals.investor_count
    if count < 0 or (isinstance(count, float) and not count.is_integer()):
        errors.append(f"{label} investor count must be a positive integer")
    return errors


def validate_funding_totals(
    commitments: FundingTotals | None = None, reservations: FundingTotals | None = None
) -> list[str]:
    errors: list[str] = []
    if commitments is not None:
        errors.extend(_check_totals(commitments, "Commitment"))
    if reservations is not None:
        errors.extend(_check_totals(reservations, "Reservation"))
    return errors


def _normalized_totals(totals: FundingTotals) -> FundingTotals:
    return FundingTotals(total_amount=totals.total_amount, investor_count=int(totals.investor_count))


# ── Project operations ──────────────────────────────────────────────────────


def create_project(form: ProjectForm, now: datetime | None = None) -> Project:
    errors = validate_project(form)
    if errors:
        raise ValidationFailedError(errors)

    now = now or utcnow()
    project = Project(
        id=new_id(),
        project_name=form.project_name.strip(),
        legal_project_name=form.legal_project_name.strip(),
        unit_calculation_precision=form.unit_calculation_precision,
        target_amount=form.target_amount,
        minimum_investment=form.minimum_investment,
        currency=form.currency,
        timeframe=Timeframe(start_date=form.start_date, end_date=form.end_date),
        created_at=now,
        updated_at=now,
    )
    logger.info("project.created", project_id=project.id, name=project.project_name)
    return project


def update_project(
    project: Project, changes: ProjectUpdate, now: datetime | None = None
) -> Project:
    """Apply a partial update after validating the merged form."""
    provided = {
        field: value
        for field, value in changes.model_dump(exclude_unset=True).items()
        if value is not None or field in _CLEARABLE_FIELDS
    }
    if not provided:
        return project

    merged = ProjectForm(
        project_name=project.project_name,
        legal_project_name=project.legal_project_name,
        unit_calculation_precision=project.unit_calculation_precision,
        target_amount=project.target_amount,
        minimum_investment=project.minimum_investment,
        currency=project.currency,
        start_date=project.timeframe.start_date,
        end_date=project.timeframe.end_date,
    ).model_copy(update=provided)

    errors = validate_project(merged)
    if errors:
        raise ValidationFailedError(errors)

    update = {
        "project_name": merged.project_name.strip(),
        "legal_project_name": merged.legal_project_name.strip(),
        "unit_calculation_precision": merged.unit_calculation_precision,
        "target_amount": merged.target_amount,
        "minimum_investment": merged.minimum_investment,
        "currency": merged.currency,
        "timeframe": Timeframe(start_date=merged.start_date, end_date=merged.end_date),
        "updated_at": now or utcnow(),
    }
    return project.model_copy(update=update)


def update_commitments(
    project: Project, commitments: FundingTotals, now: datetime | None = None
) -> Project:
    return update_funding_totals(project, commitments=commitments, now=now)


def update_reservations(
    project: Project, reservations: FundingTotals, now: datetime | None = None
) -> Project:
    return update_funding_totals(project, reservations=reservations, now=now)


def update_funding_totals(
    project: Project,
    *,
    commitments: FundingTotals | None = None,
    reservations: FundingTotals | None = None,
    now: datetime | None = None,
) -> Project:
    """Replace commitments and/or reservations wholesale."""
    errors = validate_funding_totals(commitments, reservations)
    if errors:
        raise ValidationFailedError(errors)

    update: dict = {"updated_at": now or utcnow()}
    if commitments is not None:
        update["commitments"] = _normalized_totals(commitments)
    if reservations is not None:
        update["reservations"] = _normalized_totals(reservations)
    return project.model_copy(update=update)


# ── KPIs ────────────────────────────────────────────────────────────────────


def calculate_kpis(project: Project, now: datetime | None = None) -> ProjectKPIs:
    now = now or utcnow()
    end = datetime.combine(project.timeframe.end_date, time.min, tzinfo=timezone.utc)
    days_remaining = max(0, math.ceil((end - now).total_seconds() / 86400))

    committed = project.commitments.total_amount
    if project.target_amount > 0:
        ratio = committed / project.target_amount * 100
        percentage = int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    else:
        percentage = 0

    return ProjectKPIs(
        total_commitments=int(project.commitments.investor_count),
        total_committed_amount=committed,
        funding_percentage=min(100, percentage),
        days_remaining=days_remaining,
        currency=project.currency,
    )
