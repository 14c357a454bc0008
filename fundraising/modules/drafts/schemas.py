"""Draft workflow schemas: save status, outcomes and draft store records."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fundraising.models.base import CamelModel
from fundraising.models.enums import ConflictType, OutcomeKind, ResolutionStrategy, SaveState

DraftData = dict[str, Any]


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = []

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)


DraftValidator = Callable[[DraftData], ValidationResult]


class SaveStatus(CamelModel):
    status: SaveState = SaveState.SAVED
    last_saved: datetime | None = None
    last_auto_save: datetime | None = None
    has_unsaved_changes: bool = False
    version: int = Field(0, ge=0)
    error: str | None = None
    conflict_id: str | None = None


class SaveOutcome(BaseModel):
    """Result of one save/publish attempt, mirrored to the callbacks."""

    kind: OutcomeKind
    data: Any = None
    error: str | None = None
    conflict_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


# ── Draft store payloads ─────────────────────────────────────────────────────


class SaveDraftRequest(CamelModel):
    session_id: str
    draft_data: DraftData
    is_auto_save: bool


class PublishDraftRequest(CamelModel):
    session_id: str
    change_description: str | None = None


class RecoveredDraft(CamelModel):
    draft_data: DraftData = {}
    version: int = 0


class DealRoomDraft(CamelModel):
    id: str
    project_id: str
    user_id: str | None = None
    session_id: str
    draft_data: DraftData = {}
    version: int = 1
    last_saved_version: int | None = None
    is_auto_save: bool = True
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    @property
    def has_unsaved_changes(self) -> bool:
        return self.last_saved_version is None or self.version > self.last_saved_version


class DealRoomVersion(CamelModel):
    id: str
    project_id: str
    version: int
    data: DraftData
    change_description: str | None = None
    created_at: datetime
    created_by: str | None = None


class ConflictResolution(CamelModel):
    conflict_id: str
    project_id: str
    session_id: str
    conflict_type: ConflictType
    local_version: int
    server_version: int
    local_data: DraftData
    server_data: DraftData
    conflict_fields: list[str] = []
    resolved_data: DraftData | None = None
    resolution: ResolutionStrategy | None = None
    created_at: datetime
    resolved_at: datetime | None = None
