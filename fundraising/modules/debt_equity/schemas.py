"""Pydantic schemas for debt/equity unit classes."""

from datetime import datetime
from decimal import Decimal

from fundraising.models.base import CamelModel, Entity


class DebtEquityClassForm(CamelModel):
    unit_class: str = ""
    unit_price: Decimal | None = None
    is_open_to_investments: bool = False
    investment_increment_amount: Decimal | None = None
    min_investment_amount: Decimal | None = None
    max_investment_amount: Decimal | None = None


class DebtEquityClass(Entity):
    project_id: str
    unit_class: str
    unit_price: Decimal
    is_open_to_investments: bool = False
    investment_increment_amount: Decimal
    min_investment_amount: Decimal
    max_investment_amount: Decimal


class CustomUnitClassForm(CamelModel):
    name: str = ""


class CustomUnitClass(CamelModel):
    id: str
    name: str
    created_at: datetime
