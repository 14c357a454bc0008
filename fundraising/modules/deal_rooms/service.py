"""Business logic for deal rooms.

Validation works on wire-shaped mappings (camelCase keys) because the same
rules gate both entity updates and the editor's draft payloads.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from fundraising.core.errors import ValidationFailedError
from fundraising.models.base import new_id, utcnow
from fundraising.models.enums import DealRoomSection
from fundraising.modules.deal_rooms.schemas import (
    MAX_BLURB_LENGTH,
    MAX_SUMMARY_LENGTH,
    DealRoom,
    DealRoomCompletionStatus,
    ExternalLink,
    KeyInfoItem,
    ShowcasePhoto,
)
from fundraising.modules.drafts.schemas import ValidationResult
from fundraising.services.url_validation import is_parsable_url

logger = structlog.get_logger()

IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
MAX_SHOWCASE_PHOTO_SIZE = 10 * 1024 * 1024

_timestamp = TypeAdapter(datetime)


# ── Validation ──────────────────────────────────────────────────────────────


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_order(value: Any) -> bool:
    return (
        _is_number(value)
        and math.isfinite(value)
        and value >= 0
        and float(value).is_integer()
    )


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _check_text(value: Any, label: str, limit: int) -> str | None:
    if not isinstance(value, str):
        return f"{label} must be a string"
    if len(value) > limit:
        return f"{label} must be less than {limit:,} characters"
    return None


def _check_links(
    items: Any, *, label: str, item_label: str, url_key: str, url_label: str
) -> list[str]:
    if not isinstance(items, Sequence) or isinstance(items, str):
        return [f"{label} must be an array"]

    errors = []
    for index, item in enumerate(items, start=1):
        item = item if isinstance(item, Mapping) else {}
        prefix = f"{item_label} {index}"
        if _is_blank(item.get("name")):
            errors.append(f"{prefix}: Name is required")
        url = item.get(url_key)
        if _is_blank(url):
            errors.append(f"{prefix}: {url_label} is required")
        elif not is_parsable_url(url):
            errors.append(f"{prefix}: {url_label} must be a valid URL")
        if not _is_order(item.get("order")):
            errors.append(f"{prefix}: Order must be a non-negative number")
    return errors


def _check_showcase_photo(photo: Any) -> list[str]:
    if isinstance(photo, ShowcasePhoto):
        photo = photo.model_dump(by_alias=True)
    if not isinstance(photo, Mapping):
        photo = {}

    errors = []
    if _is_blank(photo.get("filename")):
        errors.append("Showcase photo filename is required")
    if _is_blank(photo.get("originalName")):
        errors.append("Showcase photo original name is required")
    mime_type = photo.get("mimeType")
    if _is_blank(mime_type):
        errors.append("Showcase photo MIME type is required")
    elif mime_type.lower() not in IMAGE_MIME_TYPES:
        errors.append("Showcase photo must be a valid image format (JPEG, PNG, WebP)")
    size = photo.get("size")
    if not _is_number(size) or size <= 0:
        errors.append("Showcase photo size must be a positive number")
    try:
        _timestamp.validate_python(photo.get("uploadedAt"))
    except ValidationError:
        errors.append("Showcase photo upload date is required")
    return errors


def validate_deal_room(data: Mapping[str, Any]) -> ValidationResult:
    """Check every present section; absent keys are not validated."""
    errors: list[str] = []

    if "projectId" in data and _is_blank(data["projectId"]):
        errors.append("Project ID is required")

    if data.get("investmentBlurb") is not None:
        message = _check_text(data["investmentBlurb"], "Investment blurb", MAX_BLURB_LENGTH)
        if message:
            errors.append(message)

    if data.get("investmentSummary") is not None:
        message = _check_text(data["investmentSummary"], "Investment summary", MAX_SUMMARY_LENGTH)
        if message:
            errors.append(message)

    if data.get("keyInfo") is not None:
        errors.extend(
            _check_links(
                data["keyInfo"],
                label="Key info",
                item_label="Key info item",
                url_key="link",
                url_label="Link",
            )
        )

    if data.get("externalLinks") is not None:
        errors.extend(
            _check_links(
                data["externalLinks"],
                label="External links",
                item_label="External link",
                url_key="url",
                url_label="URL",
            )
        )

    if data.get("showcasePhoto"):
        errors.extend(_check_showcase_photo(data["showcasePhoto"]))

    return ValidationResult.from_errors(errors)


def validate_showcase_upload(size: int, original_name: str | None, mime_type: str | None) -> list[str]:
    """Checks applied to a raw image before it becomes a ShowcasePhoto record."""
    errors = []
    if size <= 0:
        errors.append("File is required")
    if _is_blank(original_name):
        errors.append("Original filename is required")
    if _is_blank(mime_type) or mime_type.lower() not in IMAGE_MIME_TYPES:
        errors.append("Invalid image format. Only JPEG, PNG, and WebP are supported")
    if size > MAX_SHOWCASE_PHOTO_SIZE:
        errors.append("File size too large. Maximum size is 10MB")
    return errors


# ── Deal room operations ────────────────────────────────────────────────────


def create_default_deal_room(project_id: str, now: datetime | None = None) -> DealRoom:
    if _is_blank(project_id):
        raise ValidationFailedError(["Project ID is required"])
    now = now or utcnow()
    return DealRoom(id=new_id("dr"), project_id=project_id, created_at=now, updated_at=now)


def _key_info_items(items: Sequence[Mapping[str, Any]]) -> list[KeyInfoItem]:
    return [
        KeyInfoItem(
            id=item.get("id") or new_id("item"),
            name=item["name"].strip(),
            link=item["link"].strip(),
            order=int(item["order"]),
        )
        for item in items
    ]


def _external_links(items: Sequence[Mapping[str, Any]]) -> list[ExternalLink]:
    return [
        ExternalLink(
            id=item.get("id") or new_id("item"),
            name=item["name"].strip(),
            url=item["url"].strip(),
            order=int(item["order"]),
        )
        for item in items
    ]


def _wire(items: Sequence[Any]) -> list[Any]:
    return [i.model_dump(by_alias=True) if isinstance(i, (KeyInfoItem, ExternalLink)) else i for i in items]


def update_deal_room(
    room: DealRoom, changes: Mapping[str, Any], now: datetime | None = None
) -> DealRoom:
    """Validate a wire-shaped partial update and return the updated room."""
    changes = dict(changes)
    for key in ("keyInfo", "externalLinks"):
        if isinstance(changes.get(key), list):
            changes[key] = _wire(changes[key])
    if isinstance(changes.get("showcasePhoto"), ShowcasePhoto):
        changes["showcasePhoto"] = changes["showcasePhoto"].model_dump(by_alias=True)

    result = validate_deal_room(changes)
    if not result.is_valid:
        raise ValidationFailedError(result.errors)

    update: dict[str, Any] = {"updated_at": now or utcnow()}
    if changes.get("investmentBlurb") is not None:
        update["investment_blurb"] = changes["investmentBlurb"]
    if changes.get("investmentSummary") is not None:
        update["investment_summary"] = changes["investmentSummary"]
    if changes.get("keyInfo") is not None:
        update["key_info"] = _key_info_items(changes["keyInfo"])
    if changes.get("externalLinks") is not None:
        update["external_links"] = _external_links(changes["externalLinks"])
    if changes.get("showcasePhoto"):
        update["showcase_photo"] = ShowcasePhoto.model_validate(changes["showcasePhoto"])
    return room.model_copy(update=update)


def update_investment_blurb(room: DealRoom, blurb: str, now: datetime | None = None) -> DealRoom:
    return update_deal_room(room, {"investmentBlurb": blurb}, now)


def update_investment_summary(room: DealRoom, summary: str, now: datetime | None = None) -> DealRoom:
    return update_deal_room(room, {"investmentSummary": summary}, now)


def update_key_info(
    room: DealRoom, key_info: Sequence[Mapping[str, Any] | KeyInfoItem], now: datetime | None = None
) -> DealRoom:
    return update_deal_room(room, {"keyInfo": list(key_info)}, now)


def update_external_links(
    room: DealRoom,
    external_links: Sequence[Mapping[str, Any] | ExternalLink],
    now: datetime | None = None,
) -> DealRoom:
    return update_deal_room(room, {"externalLinks": list(external_links)}, now)


def set_showcase_photo(
    room: DealRoom, photo: ShowcasePhoto | Mapping[str, Any], now: datetime | None = None
) -> DealRoom:
    updated = update_deal_room(room, {"showcasePhoto": photo}, now)
    logger.info(
        "deal_room.showcase_photo_set",
        deal_room_id=room.id,
        filename=updated.showcase_photo.filename,
        replaced=room.showcase_photo.filename if room.showcase_photo else None,
    )
    return updated


def remove_showcase_photo(room: DealRoom, now: datetime | None = None) -> DealRoom:
    return room.model_copy(update={"showcase_photo": None, "updated_at": now or utcnow()})


# ── Completion ──────────────────────────────────────────────────────────────


def get_completion_status(room: DealRoom | None) -> DealRoomCompletionStatus:
    """Which of the five editor sections have content."""
    section_status = {
        DealRoomSection.SHOWCASE_PHOTO: bool(room and room.showcase_photo),
        DealRoomSection.INVESTMENT_BLURB: bool(room and room.investment_blurb.strip()),
        DealRoomSection.INVESTMENT_SUMMARY: bool(room and room.investment_summary.strip()),
        DealRoomSection.KEY_INFO: bool(room and room.key_info),
        DealRoomSection.EXTERNAL_LINKS: bool(room and room.external_links),
    }
    completed = [section for section, done in section_status.items() if done]
    total = len(section_status)
    return DealRoomCompletionStatus(
        completion_percentage=round(len(completed) / total * 100),
        completed_sections=completed,
        total_sections=total,
        section_status=section_status,
    )
