"""Pydantic schemas for contacts."""

from fundraising.models.base import CamelModel, Entity


class ContactForm(CamelModel):
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    fax: str | None = None


class Contact(Entity):
    first_name: str
    middle_name: str | None = None
    last_name: str
    email: str | None = None
    phone_number: str | None = None
    fax: str | None = None
