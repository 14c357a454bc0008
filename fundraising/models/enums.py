"""Enumerations shared across the domain models."""

import enum


# ── Draft workflow ───────────────────────────────────────────────────────────


class SaveState(str, enum.Enum):
    SAVED = "saved"
    SAVING = "saving"
    UNSAVED = "unsaved"
    ERROR = "error"
    CONFLICT = "conflict"


class OutcomeKind(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    CONFLICT = "conflict"


class ConflictType(str, enum.Enum):
    CONCURRENT_EDIT = "concurrent_edit"
    VERSION_MISMATCH = "version_mismatch"
    DATA_CORRUPTION = "data_corruption"


class ResolutionStrategy(str, enum.Enum):
    USE_LOCAL = "use_local"
    USE_SERVER = "use_server"
    MERGE = "merge"
    MANUAL = "manual"


# ── Links ────────────────────────────────────────────────────────────────────


class UrlType(str, enum.Enum):
    DOCUMENT = "Document"
    IMAGE = "Image"
    VIDEO = "Video"
    LINKEDIN = "LinkedIn"
    TWITTER = "Twitter/X"
    FACEBOOK = "Facebook"
    YOUTUBE = "YouTube"


# ── Deal room ────────────────────────────────────────────────────────────────


class DealRoomSection(str, enum.Enum):
    SHOWCASE_PHOTO = "showcasePhoto"
    INVESTMENT_BLURB = "investmentBlurb"
    INVESTMENT_SUMMARY = "investmentSummary"
    KEY_INFO = "keyInfo"
    EXTERNAL_LINKS = "externalLinks"


# ── Documents ────────────────────────────────────────────────────────────────


class FileCategory(str, enum.Enum):
    PDF = "pdf"
    WORD = "word"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    TEXT = "text"
    IMAGE = "image"
    OTHER = "other"


# ── Contacts ─────────────────────────────────────────────────────────────────


class ContactSortField(str, enum.Enum):
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    CREATED_AT = "createdAt"
