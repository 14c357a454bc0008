"""Pydantic schemas for fundraising projects."""

from datetime import date
from decimal import Decimal

from pydantic import Field

from fundraising.models.base import CamelModel, Entity


# ── Form input ──────────────────────────────────────────────────────────────


class ProjectForm(CamelModel):
    """Create-form payload. Loosely typed so every rule can report its own message."""

    project_name: str = ""
    legal_project_name: str = ""
    unit_calculation_precision: int = 2
    target_amount: Decimal | None = None
    minimum_investment: Decimal | None = None
    currency: str = "USD"
    start_date: date | None = None
    end_date: date | None = None


class ProjectUpdate(CamelModel):
    project_name: str | None = None
    legal_project_name: str | None = None
    unit_calculation_precision: int | None = None
    target_amount: Decimal | None = None
    minimum_investment: Decimal | None = None
    currency: str | None = None
    start_date: date | None = None
    end_date: date | None = None


# ── Entity ──────────────────────────────────────────────────────────────────


class Timeframe(CamelModel):
    start_date: date
    end_date: date


class FundingTotals(CamelModel):
    """Commitments or reservations; always replaced as a whole."""

    total_amount: Decimal = Decimal(0)
    investor_count: int | float = 0


class Project(Entity):
    project_name: str
    legal_project_name: str
    unit_calculation_precision: int = Field(2, ge=0, le=10)
    target_amount: Decimal
    minimum_investment: Decimal | None = None
    currency: str = "USD"
    timeframe: Timeframe
    commitments: FundingTotals = Field(default_factory=FundingTotals)
    reservations: FundingTotals = Field(default_factory=FundingTotals)


class ProjectKPIs(CamelModel):
    total_commitments: int
    total_committed_amount: Decimal
    funding_percentage: int
    days_remaining: int
    currency: str
