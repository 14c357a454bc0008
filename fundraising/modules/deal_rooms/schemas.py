"""Pydantic schemas for the deal room content editor."""

from datetime import datetime

from pydantic import Field

from fundraising.models.base import CamelModel, Entity
from fundraising.models.enums import DealRoomSection

MAX_BLURB_LENGTH = 500
MAX_SUMMARY_LENGTH = 10_000


class ShowcasePhoto(CamelModel):
    filename: str
    original_name: str
    mime_type: str
    size: int = Field(..., gt=0)
    uploaded_at: datetime


class KeyInfoItem(CamelModel):
    id: str
    name: str
    link: str
    order: int = Field(0, ge=0)


class ExternalLink(CamelModel):
    id: str
    name: str
    url: str
    order: int = Field(0, ge=0)


class DealRoom(Entity):
    project_id: str
    showcase_photo: ShowcasePhoto | None = None
    investment_blurb: str = Field("", max_length=MAX_BLURB_LENGTH)
    investment_summary: str = Field("", max_length=MAX_SUMMARY_LENGTH)
    key_info: list[KeyInfoItem] = []
    external_links: list[ExternalLink] = []


class DealRoomCompletionStatus(CamelModel):
    completion_percentage: int
    completed_sections: list[DealRoomSection]
    total_sections: int
    section_status: dict[DealRoomSection, bool]
