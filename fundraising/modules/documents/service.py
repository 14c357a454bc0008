"""Business logic for project documents."""

import uuid
from collections.abc import Iterable
from datetime import datetime
from pathlib import PurePath

import structlog

from fundraising.core.errors import ValidationFailedError
from fundraising.models.base import utcnow
from fundraising.models.enums import FileCategory
from fundraising.modules.documents.schemas import (
    MAX_FILE_SIZE,
    SUPPORTED_FILE_TYPES,
    Document,
    DocumentUpload,
)

logger = structlog.get_logger()

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

# Substring checks, first match wins; OOXML types all contain "officedocument"
_CATEGORY_MARKERS: tuple[tuple[FileCategory, tuple[str, ...]], ...] = (
    (FileCategory.PDF, ("pdf",)),
    (FileCategory.SPREADSHEET, ("excel", "spreadsheet")),
    (FileCategory.PRESENTATION, ("powerpoint", "presentation")),
    (FileCategory.WORD, ("word", "document")),
    (FileCategory.TEXT, ("text",)),
    (FileCategory.IMAGE, ("image",)),
)


def validate_document_upload(upload: DocumentUpload) -> list[str]:
    errors: list[str] = []
    if not upload.custom_name.strip():
        errors.append("Custom name is required")
    if not upload.project_id.strip():
        errors.append("Project ID is required")
    if upload.file_size > MAX_FILE_SIZE:
        errors.append(
            f"File size exceeds maximum limit of {round(MAX_FILE_SIZE / (1024 * 1024))}MB"
        )
    if upload.mime_type not in SUPPORTED_FILE_TYPES:
        supported = ", ".join(SUPPORTED_FILE_TYPES.values())
        errors.append(f"Unsupported file type. Supported formats: {supported}")
    if upload.file_size == 0:
        errors.append("File is empty")
    return errors


def create_document(upload: DocumentUpload, now: datetime | None = None) -> Document:
    """Build the document record; the stored file name is a fresh UUID plus the original extension."""
    errors = validate_document_upload(upload)
    if errors:
        raise ValidationFailedError(errors)

    now = now or utcnow()
    extension = PurePath(upload.original_name).suffix
    document = Document(
        id=str(uuid.uuid4()),
        project_id=upload.project_id,
        original_name=upload.original_name,
        custom_name=upload.custom_name.strip(),
        file_name=f"{uuid.uuid4()}{extension}",
        file_size=upload.file_size,
        mime_type=upload.mime_type,
        file_extension=extension,
        uploaded_at=now,
        updated_at=now,
    )
    logger.info(
        "document.created",
        document_id=document.id,
        project_id=document.project_id,
        size=document.file_size,
    )
    return document


def rename_document(document: Document, custom_name: str, now: datetime | None = None) -> Document:
    if not custom_name or not custom_name.strip():
        raise ValidationFailedError(["Custom name cannot be empty"])
    return document.model_copy(
        update={"custom_name": custom_name.strip(), "updated_at": now or utcnow()}
    )


def search_documents(documents: Iterable[Document], term: str | None) -> list[Document]:
    documents = list(documents)
    if not term or not term.strip():
        return documents
    needle = term.strip().lower()
    return [
        d
        for d in documents
        if needle in d.custom_name.lower() or needle in d.original_name.lower()
    ]


def format_file_size(size: int) -> str:
    """Human readable size: ``1536`` -> ``"1.5 KB"``."""
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    value = float(size)
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[exponent]}"


def file_category(mime_type: str) -> FileCategory:
    lowered = mime_type.lower()
    for category, markers in _CATEGORY_MARKERS:
        if any(marker in lowered for marker in markers):
            return category
    return FileCategory.OTHER
