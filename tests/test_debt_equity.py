"""Tests for debt/equity classes and custom unit classes."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from fundraising.core.errors import ValidationFailedError
from fundraising.modules.debt_equity.schemas import CustomUnitClassForm, DebtEquityClassForm
from fundraising.modules.debt_equity.service import (
    DUPLICATE_CUSTOM_CLASS,
    create_custom_unit_class,
    create_debt_equity_class,
    to_form,
    update_debt_equity_class,
    validate_custom_unit_class,
    validate_debt_equity_class,
)

NOW = datetime(2024, 2, 1, tzinfo=timezone.utc)


def _form(**overrides) -> DebtEquityClassForm:
    data = {
        "unit_class": "Class A",
        "unit_price": Decimal("1.00"),
        "is_open_to_investments": True,
        "investment_increment_amount": Decimal("500"),
        "min_investment_amount": Decimal("1000"),
        "max_investment_amount": Decimal("10000"),
    }
    data.update(overrides)
    return DebtEquityClassForm(**data)


# ── Debt/equity classes ───────────────────────────────────────────────────────


class TestValidateDebtEquityClass:
    def test_valid(self):
        assert validate_debt_equity_class(_form()) == []

    def test_all_amounts_required(self):
        form = DebtEquityClassForm(unit_class="")
        assert validate_debt_equity_class(form) == [
            "Unit class is required",
            "Unit price must be greater than 0",
            "Investment increment amount must be greater than 0",
            "Minimum investment amount must be greater than 0",
            "Maximum investment amount must be greater than 0",
        ]

    def test_unit_class_length(self):
        errors = validate_debt_equity_class(_form(unit_class="x" * 101))
        assert errors == ["Unit class must be less than 100 characters"]

    def test_min_above_max(self):
        errors = validate_debt_equity_class(
            _form(min_investment_amount=Decimal("20000"), investment_increment_amount=Decimal("1000"))
        )
        assert errors == [
            "Minimum investment amount cannot be greater than maximum investment amount"
        ]

    def test_increment_above_min(self):
        errors = validate_debt_equity_class(
            _form(investment_increment_amount=Decimal("3000"), max_investment_amount=Decimal("7000"))
        )
        assert errors == [
            "Investment increment amount cannot be greater than minimum investment amount"
        ]

    def test_increment_must_divide_range(self):
        errors = validate_debt_equity_class(_form(investment_increment_amount=Decimal("700")))
        assert errors == [
            "Investment increment amount must divide evenly into the investment range"
        ]

    def test_fractional_amounts_divide_exactly(self):
        form = _form(
            investment_increment_amount=Decimal("0.1"),
            min_investment_amount=Decimal("0.3"),
            max_investment_amount=Decimal("1.0"),
        )
        assert validate_debt_equity_class(form) == []

    def test_equal_min_and_max(self):
        form = _form(min_investment_amount=Decimal("1000"), max_investment_amount=Decimal("1000"))
        assert validate_debt_equity_class(form) == []


class TestDebtEquityOperations:
    def test_create(self):
        record = create_debt_equity_class("proj-1", _form(unit_class="  Senior Notes "), now=NOW)
        assert record.unit_class == "Senior Notes"
        assert record.project_id == "proj-1"
        assert record.created_at == record.updated_at == NOW

    def test_create_invalid(self):
        with pytest.raises(ValidationFailedError):
            create_debt_equity_class("proj-1", _form(unit_price=Decimal("0")))

    def test_update_and_round_trip_form(self):
        record = create_debt_equity_class("proj-1", _form(), now=NOW)
        later = datetime(2024, 2, 2, tzinfo=timezone.utc)
        updated = update_debt_equity_class(record, _form(is_open_to_investments=False), now=later)
        assert updated.is_open_to_investments is False
        assert updated.id == record.id
        assert updated.updated_at == later
        assert to_form(updated) == _form(is_open_to_investments=False)


# ── Custom unit classes ───────────────────────────────────────────────────────


class TestCustomUnitClass:
    def test_valid(self):
        assert validate_custom_unit_class(CustomUnitClassForm(name="Series Seed-1_b")) == []

    @pytest.mark.parametrize("name", ["Class A", "debt", "  EQUITY "])
    def test_reserved(self, name):
        errors = validate_custom_unit_class(CustomUnitClassForm(name=name))
        assert errors == ["This class name is reserved and cannot be used"]

    def test_too_short(self):
        errors = validate_custom_unit_class(CustomUnitClassForm(name="A"))
        assert errors == ["Custom class name must be at least 2 characters long"]

    def test_too_long(self):
        errors = validate_custom_unit_class(CustomUnitClassForm(name="a" * 101))
        assert errors == ["Custom class name must be less than 100 characters"]

    def test_special_characters(self):
        errors = validate_custom_unit_class(CustomUnitClassForm(name="Notes!"))
        assert errors == [
            "Custom class name can only contain letters, numbers, spaces, hyphens, and underscores"
        ]

    def test_empty(self):
        errors = validate_custom_unit_class(CustomUnitClassForm(name=""))
        assert errors[0] == "Custom class name is required"

    def test_create_rejects_duplicates(self):
        first = create_custom_unit_class(CustomUnitClassForm(name=" Mezzanine "), now=NOW)
        assert first.name == "Mezzanine"
        with pytest.raises(ValueError, match=DUPLICATE_CUSTOM_CLASS):
            create_custom_unit_class(CustomUnitClassForm(name="mezzanine"), existing=[first])
