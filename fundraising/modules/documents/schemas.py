"""Pydantic schemas for project documents."""

from datetime import datetime

from pydantic import Field

from fundraising.models.base import CamelModel

# MIME type -> canonical extension
SUPPORTED_FILE_TYPES: dict[str, str] = {
    # Microsoft Office
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/vnd.ms-powerpoint": ".ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": ".pptx",
    # PDF
    "application/pdf": ".pdf",
    # Text
    "text/plain": ".txt",
    "application/rtf": ".rtf",
    # OpenDocument
    "application/vnd.oasis.opendocument.text": ".odt",
    "application/vnd.oasis.opendocument.spreadsheet": ".ods",
    "application/vnd.oasis.opendocument.presentation": ".odp",
    # Other
    "text/csv": ".csv",
    "text/markdown": ".md",
    "application/json": ".json",
    "text/xml": ".xml",
    "application/xml": ".xml",
}

MAX_FILE_SIZE = 10 * 1024 * 1024


class DocumentUpload(CamelModel):
    """Metadata of an uploaded file; the bytes themselves are stored elsewhere."""

    project_id: str
    custom_name: str
    original_name: str
    mime_type: str
    file_size: int


class Document(CamelModel):
    id: str
    project_id: str
    original_name: str
    custom_name: str
    file_name: str
    file_size: int = Field(..., ge=0)
    mime_type: str
    file_extension: str
    uploaded_at: datetime
    updated_at: datetime
