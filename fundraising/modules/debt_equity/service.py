"""Business logic for debt/equity unit classes."""

import re
from collections.abc import Iterable
from datetime import datetime

import structlog

from fundraising.core.errors import ValidationFailedError
from fundraising.models.base import new_id, utcnow
from fundraising.modules.debt_equity.schemas import (
    CustomUnitClass,
    CustomUnitClassForm,
    DebtEquityClass,
    DebtEquityClassForm,
)

logger = structlog.get_logger()

MAX_UNIT_CLASS_LENGTH = 100
MIN_CUSTOM_NAME_LENGTH = 2
RESERVED_CLASS_NAMES = frozenset({"class a", "class b", "class c", "debt", "equity"})
CUSTOM_NAME_RE = re.compile(r"^[a-zA-Z0-9\s\-_]+$")
DUPLICATE_CUSTOM_CLASS = "A custom unit class with this name already exists"


# ── Debt/equity classes ─────────────────────────────────────────────────────


def validate_debt_equity_class(form: DebtEquityClassForm) -> list[str]:
    errors: list[str] = []

    if not form.unit_class or not form.unit_class.strip():
        errors.append("Unit class is required")
    elif len(form.unit_class) > MAX_UNIT_CLASS_LENGTH:
        errors.append(f"Unit class must be less than {MAX_UNIT_CLASS_LENGTH} characters")

    increment = form.investment_increment_amount
    low = form.min_investment_amount
    high = form.max_investment_amount

    for value, label in (
        (form.unit_price, "Unit price"),
        (increment, "Investment increment amount"),
        (low, "Minimum investment amount"),
        (high, "Maximum investment amount"),
    ):
        if not value or value <= 0:
            errors.append(f"{label} must be greater than 0")

    if low and high and low > high:
        errors.append("Minimum investment amount cannot be greater than maximum investment amount")
    if increment and low and increment > low:
        errors.append("Investment increment amount cannot be greater than minimum investment amount")
    if increment and low and high and increment > 0:
        spread = high - low
        if spread > 0 and spread % increment != 0:
            errors.append("Investment increment amount must divide evenly into the investment range")

    return errors


def create_debt_equity_class(
    project_id: str, form: DebtEquityClassForm, now: datetime | None = None
) -> DebtEquityClass:
    errors = validate_debt_equity_class(form)
    if errors:
        raise ValidationFailedError(errors)

    now = now or utcnow()
    record = DebtEquityClass(
        id=new_id(),
        project_id=project_id,
        unit_class=form.unit_class.strip(),
        unit_price=form.unit_price,
        is_open_to_investments=form.is_open_to_investments,
        investment_increment_amount=form.investment_increment_amount,
        min_investment_amount=form.min_investment_amount,
        max_investment_amount=form.max_investment_amount,
        created_at=now,
        updated_at=now,
    )
    logger.info("debt_equity_class.created", class_id=record.id, project_id=project_id)
    return record


def update_debt_equity_class(
    record: DebtEquityClass, form: DebtEquityClassForm, now: datetime | None = None
) -> DebtEquityClass:
    """Replace every editable field; the form is validated as a whole."""
    errors = validate_debt_equity_class(form)
    if errors:
        raise ValidationFailedError(errors)
    return record.model_copy(
        update={
            "unit_class": form.unit_class.strip(),
            "unit_price": form.unit_price,
            "is_open_to_investments": form.is_open_to_investments,
            "investment_increment_amount": form.investment_increment_amount,
            "min_investment_amount": form.min_investment_amount,
            "max_investment_amount": form.max_investment_amount,
            "updated_at": now or utcnow(),
        }
    )


def to_form(record: DebtEquityClass) -> DebtEquityClassForm:
    return DebtEquityClassForm.model_validate(
        record.model_dump(include=set(DebtEquityClassForm.model_fields))
    )


# ── Custom unit classes ─────────────────────────────────────────────────────


def validate_custom_unit_class(form: CustomUnitClassForm) -> list[str]:
    errors: list[str] = []
    name = form.name or ""
    trimmed = name.strip()

    if not trimmed:
        errors.append("Custom class name is required")
    elif len(name) > MAX_UNIT_CLASS_LENGTH:
        errors.append(f"Custom class name must be less than {MAX_UNIT_CLASS_LENGTH} characters")
    elif len(trimmed) < MIN_CUSTOM_NAME_LENGTH:
        errors.append(
            f"Custom class name must be at least {MIN_CUSTOM_NAME_LENGTH} characters long"
        )

    if trimmed.lower() in RESERVED_CLASS_NAMES:
        errors.append("This class name is reserved and cannot be used")

    if not CUSTOM_NAME_RE.match(trimmed):
        errors.append(
            "Custom class name can only contain letters, numbers, spaces, hyphens, and underscores"
        )

    return errors


def create_custom_unit_class(
    form: CustomUnitClassForm,
    existing: Iterable[CustomUnitClass] = (),
    now: datetime | None = None,
) -> CustomUnitClass:
    errors = validate_custom_unit_class(form)
    if errors:
        raise ValidationFailedError(errors)

    name = form.name.strip()
    if any(c.name.lower() == name.lower() for c in existing):
        raise ValueError(DUPLICATE_CUSTOM_CLASS)

    return CustomUnitClass(id=new_id(), name=name, created_at=now or utcnow())
