"""Tests for contact validation and listing helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from fundraising.core.errors import ValidationFailedError
from fundraising.models.enums import ContactSortField
from fundraising.modules.contacts.schemas import ContactForm
from fundraising.modules.contacts.service import (
    DUPLICATE_EMAIL,
    contact_display_name,
    create_contact,
    search_contacts,
    sort_contacts,
    update_contact,
    validate_contact,
)

NOW = datetime(2024, 4, 1, tzinfo=timezone.utc)


@pytest.fixture
def ada():
    return create_contact(
        ContactForm(first_name="Ada", last_name="Lovelace", email="ada@example.com"), now=NOW
    )


@pytest.fixture
def grace():
    return create_contact(
        ContactForm(
            first_name="Grace",
            middle_name="Brewster",
            last_name="Hopper",
            phone_number="+1 555 0100",
        ),
        now=NOW + timedelta(days=1),
    )


class TestValidateContact:
    def test_valid(self):
        assert validate_contact(ContactForm(first_name="Ada", last_name="Lovelace")) == []

    def test_names_required_on_create(self):
        assert validate_contact(ContactForm()) == [
            "First name is required",
            "Last name is required",
        ]

    def test_partial_skips_missing_names(self):
        assert validate_contact(ContactForm(email="x@example.com"), partial=True) == []

    def test_lengths(self):
        form = ContactForm(
            first_name="a" * 51,
            last_name="b",
            middle_name="c" * 51,
            phone_number="1" * 21,
            fax="2" * 21,
        )
        assert validate_contact(form) == [
            "First name must be 50 characters or less",
            "Middle name must be 50 characters or less",
            "Phone number must be 20 characters or less",
            "Fax number must be 20 characters or less",
        ]

    @pytest.mark.parametrize(
        "email",
        ["plainaddress", "a@b", "a b@c.com", "@example.com", "ada@example..com", "ada@-example.com"],
    )
    def test_bad_email(self, email):
        errors = validate_contact(ContactForm(first_name="A", last_name="B", email=email))
        assert errors == ["Please enter a valid email address"]

    def test_empty_optional_fields_allowed(self):
        form = ContactForm(first_name="A", last_name="B", email="", fax="")
        assert validate_contact(form) == []


class TestContactOperations:
    def test_create_cleans_fields(self):
        contact = create_contact(
            ContactForm(first_name=" Ada ", last_name="Lovelace", email="", middle_name="  ")
        )
        assert contact.first_name == "Ada"
        assert contact.email is None
        assert contact.middle_name is None

    def test_create_invalid(self):
        with pytest.raises(ValidationFailedError) as exc:
            create_contact(ContactForm(first_name="Ada"))
        assert str(exc.value) == "Validation failed: Last name is required"

    def test_duplicate_email_case_insensitive(self, ada):
        with pytest.raises(ValueError, match=DUPLICATE_EMAIL):
            create_contact(
                ContactForm(first_name="A", last_name="L", email="ADA@example.com"),
                existing=[ada],
            )

    def test_update_keeps_own_email(self, ada):
        later = NOW + timedelta(hours=1)
        updated = update_contact(
            ada, ContactForm(email="ada@example.com", phone_number="123"), existing=[ada], now=later
        )
        assert updated.phone_number == "123"
        assert updated.first_name == "Ada"
        assert updated.updated_at == later

    def test_update_can_clear_optional(self, grace):
        updated = update_contact(grace, ContactForm(middle_name=""))
        assert updated.middle_name is None

    def test_display_name(self, ada, grace):
        assert contact_display_name(ada) == "Ada Lovelace"
        assert contact_display_name(grace) == "Grace Brewster Hopper"


class TestListing:
    def test_search(self, ada, grace):
        assert search_contacts([ada, grace], "love") == [ada]
        assert search_contacts([ada, grace], "EXAMPLE") == [ada]
        assert search_contacts([ada, grace], "555") == [grace]
        assert search_contacts([ada, grace], "  ") == [ada, grace]

    def test_default_sort_by_last_name(self, ada, grace):
        assert sort_contacts([ada, grace]) == [grace, ada]

    def test_sort_by_field(self, ada, grace):
        assert sort_contacts([grace, ada], ContactSortField.FIRST_NAME) == [ada, grace]
        assert sort_contacts([ada, grace], ContactSortField.CREATED_AT, descending=True) == [
            grace,
            ada,
        ]
