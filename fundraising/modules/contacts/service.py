"""Business logic for contacts."""

from collections.abc import Iterable
from datetime import datetime

import structlog
from pydantic import EmailStr, TypeAdapter, ValidationError

from fundraising.core.errors import ValidationFailedError
from fundraising.models.base import new_id, utcnow
from fundraising.models.enums import ContactSortField
from fundraising.modules.contacts.schemas import Contact, ContactForm

logger = structlog.get_logger()

_email = TypeAdapter(EmailStr)
DUPLICATE_EMAIL = "A contact with this email address already exists"

# (field, label, max length)
_NAME_RULES = (
    ("first_name", "First name", 50),
    ("last_name", "Last name", 50),
)
_OPTIONAL_RULES = (
    ("middle_name", "Middle name", 50),
    ("email", "Email", 100),
    ("phone_number", "Phone number", 20),
    ("fax", "Fax number", 20),
)


# ── Validation ──────────────────────────────────────────────────────────────


def validate_contact(form: ContactForm, *, partial: bool = False) -> list[str]:
    """Field rules for a contact form. ``partial`` only checks provided names."""
    errors: list[str] = []

    for field, label, limit in _NAME_RULES:
        value = getattr(form, field)
        if value is None and partial:
            continue
        if not value or not value.strip():
            errors.append(f"{label} is required")
        elif len(value) > limit:
            errors.append(f"{label} must be {limit} characters or less")

    for field, label, limit in _OPTIONAL_RULES:
        value = getattr(form, field)
        if value and len(value) > limit:
            errors.append(f"{label} must be {limit} characters or less")
        elif field == "email" and value and not _is_email(value):
            errors.append("Please enter a valid email address")

    return errors


def _is_email(value: str) -> bool:
    try:
        _email.validate_python(value)
    except ValidationError:
        return False
    return True


def find_duplicate_email(
    contacts: Iterable[Contact], email: str | None, exclude_id: str | None = None
) -> Contact | None:
    if not email:
        return None
    wanted = email.lower()
    for contact in contacts:
        if contact.id != exclude_id and contact.email and contact.email.lower() == wanted:
            return contact
    return None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


# ── Contact operations ──────────────────────────────────────────────────────


def create_contact(
    form: ContactForm, existing: Iterable[Contact] = (), now: datetime | None = None
) -> Contact:
    errors = validate_contact(form)
    if errors:
        raise ValidationFailedError(errors)
    if find_duplicate_email(existing, form.email):
        raise ValueError(DUPLICATE_EMAIL)

    now = now or utcnow()
    contact = Contact(
        id=new_id(),
        first_name=form.first_name.strip(),
        middle_name=_clean(form.middle_name),
        last_name=form.last_name.strip(),
        email=_clean(form.email),
        phone_number=_clean(form.phone_number),
        fax=_clean(form.fax),
        created_at=now,
        updated_at=now,
    )
    logger.info("contact.created", contact_id=contact.id)
    return contact


def update_contact(
    contact: Contact,
    changes: ContactForm,
    existing: Iterable[Contact] = (),
    now: datetime | None = None,
) -> Contact:
    provided = changes.model_dump(exclude_unset=True)
    if not provided:
        return contact

    errors = validate_contact(changes, partial=True)
    if errors:
        raise ValidationFailedError(errors)
    if find_duplicate_email(existing, changes.email, exclude_id=contact.id):
        raise ValueError(DUPLICATE_EMAIL)

    update = {}
    for field, value in provided.items():
        if field in ("first_name", "last_name"):
            if value is not None:
                update[field] = value.strip()
        else:
            update[field] = _clean(value)
    update["updated_at"] = now or utcnow()
    return contact.model_copy(update=update)


def contact_display_name(contact: Contact) -> str:
    parts = [contact.first_name, contact.middle_name, contact.last_name]
    return " ".join(p for p in parts if p)


# ── Listing ─────────────────────────────────────────────────────────────────


def search_contacts(contacts: Iterable[Contact], term: str | None) -> list[Contact]:
    """Case-insensitive match on names and email; phone numbers match verbatim."""
    contacts = list(contacts)
    if not term or not term.strip():
        return contacts
    needle = term.strip().lower()

    def matches(c: Contact) -> bool:
        texts = (c.first_name, c.last_name, c.middle_name, c.email)
        if any(t and needle in t.lower() for t in texts):
            return True
        return bool(c.phone_number and term.strip() in c.phone_number)

    return [c for c in contacts if matches(c)]


def sort_contacts(
    contacts: Iterable[Contact],
    sort_by: ContactSortField | None = None,
    descending: bool = False,
) -> list[Contact]:
    """Default order is last name, then first name."""
    if sort_by is None:
        return sorted(contacts, key=lambda c: (c.last_name.lower(), c.first_name.lower()))
    if sort_by == ContactSortField.CREATED_AT:
        return sorted(contacts, key=lambda c: c.created_at, reverse=descending)
    attr = {
        ContactSortField.FIRST_NAME: "first_name",
        ContactSortField.LAST_NAME: "last_name",
        ContactSortField.EMAIL: "email",
    }[ContactSortField(sort_by)]
    return sorted(contacts, key=lambda c: (getattr(c, attr) or "").lower(), reverse=descending)
