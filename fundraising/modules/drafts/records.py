"""Helpers for the draft store's record shapes: drafts, versions and conflicts."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from fundraising.core.config import settings
from fundraising.models.base import new_id, utcnow
from fundraising.models.enums import ConflictType, ResolutionStrategy
from fundraising.modules.drafts.conflicts import detect_conflicts, merge_draft_data
from fundraising.modules.drafts.schemas import (
    ConflictResolution,
    DealRoomDraft,
    DealRoomVersion,
    DraftData,
)


# ── Drafts ───────────────────────────────────────────────────────────────────


def create_draft_record(
    project_id: str,
    session_id: str,
    *,
    user_id: str | None = None,
    now: datetime | None = None,
) -> DealRoomDraft:
    now = now or utcnow()
    return DealRoomDraft(
        id=new_id("draft"),
        project_id=project_id,
        user_id=user_id,
        session_id=session_id,
        created_at=now,
        updated_at=now,
        expires_at=now + timedelta(hours=settings.DRAFT_TTL_HOURS),
    )


def is_expired(draft: DealRoomDraft, now: datetime | None = None) -> bool:
    return (now or utcnow()) >= draft.expires_at


# ── Versions ─────────────────────────────────────────────────────────────────


def retained_versions(
    versions: Iterable[DealRoomVersion], limit: int | None = None
) -> list[DealRoomVersion]:
    """Newest first, capped at the configured history size."""
    limit = settings.MAX_VERSION_HISTORY if limit is None else limit
    ordered = sorted(versions, key=lambda v: v.version, reverse=True)
    return ordered[:limit]


# ── Conflicts ────────────────────────────────────────────────────────────────


def open_conflict(
    local: DealRoomDraft,
    server: DealRoomDraft,
    conflict_type: ConflictType = ConflictType.CONCURRENT_EDIT,
    now: datetime | None = None,
) -> ConflictResolution:
    return ConflictResolution(
        conflict_id=new_id("conflict"),
        project_id=local.project_id,
        session_id=local.session_id,
        conflict_type=conflict_type,
        local_version=local.version,
        server_version=server.version,
        local_data=local.draft_data,
        server_data=server.draft_data,
        conflict_fields=detect_conflicts(local.draft_data, server.draft_data),
        created_at=now or utcnow(),
    )


def find_conflict(conflicts: Iterable[ConflictResolution], conflict_id: str) -> ConflictResolution:
    for conflict in conflicts:
        if conflict.conflict_id == conflict_id:
            return conflict
    raise LookupError(f"Conflict {conflict_id} not found")


def resolve_conflict(
    conflict: ConflictResolution,
    strategy: ResolutionStrategy,
    resolved_data: DraftData | None = None,
    now: datetime | None = None,
) -> ConflictResolution:
    """Record a resolution. ``manual`` requires the caller's resolved data."""
    if conflict.resolved_at is not None:
        raise ValueError("Conflict already resolved")
    strategy = ResolutionStrategy(strategy)
    if strategy == ResolutionStrategy.MANUAL:
        if resolved_data is None:
            raise ValueError("Resolved data is required for manual resolution")
        data = resolved_data
    else:
        data = merge_draft_data(conflict.local_data, conflict.server_data, strategy)
    return conflict.model_copy(
        update={"resolution": strategy, "resolved_data": data, "resolved_at": now or utcnow()}
    )
