"""Field-level comparison and merging of two deal room drafts."""

from __future__ import annotations

from fundraising.models.enums import DealRoomSection, ResolutionStrategy
from fundraising.modules.drafts.schemas import DraftData


def detect_conflicts(local: DraftData, server: DraftData) -> list[str]:
    """Sections set on both sides whose values differ, in section order."""
    conflicts: list[str] = []
    for section in DealRoomSection:
        field = section.value
        if local.get(field) is None or server.get(field) is None:
            continue
        if local[field] != server[field]:
            conflicts.append(field)
    return conflicts


def merge_draft_data(
    local: DraftData, server: DraftData, strategy: ResolutionStrategy | str
) -> DraftData:
    """Resolve two drafts.

    ``merge`` keeps every section the local draft defines and fills the rest
    from the server. ``manual`` has no automatic answer and keeps the local
    draft, leaving the caller to supply resolved data.
    """
    strategy = ResolutionStrategy(strategy)
    if strategy == ResolutionStrategy.USE_SERVER:
        return dict(server)
    if strategy != ResolutionStrategy.MERGE:
        return dict(local)

    merged: DraftData = {}
    for section in DealRoomSection:
        field = section.value
        value = local.get(field)
        if value is None:
            value = server.get(field)
        if value is not None:
            merged[field] = value
    return merged
