"""Pure transitions over SaveStatus.

Every function takes the current status and returns a new one; nothing here
performs I/O or keeps state between calls.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fundraising.models.base import utcnow
from fundraising.models.enums import SaveState
from fundraising.modules.drafts.schemas import SaveStatus


def initial_status() -> SaveStatus:
    return SaveStatus()


def merge_remote_status(status: SaveStatus, remote: dict[str, Any]) -> SaveStatus:
    """Overlay the store's status payload; wire timestamps become datetimes."""
    wire = status.model_dump(by_alias=True)
    wire.update(remote)
    # Absent timestamps on the wire mean "never"
    wire["lastSaved"] = remote.get("lastSaved") or None
    wire["lastAutoSave"] = remote.get("lastAutoSave") or None
    return SaveStatus.model_validate(wire)


def mark_pending(status: SaveStatus) -> SaveStatus:
    """Auto-save path: record new edits without leaving error/conflict states."""
    next_state = SaveState.UNSAVED if status.status == SaveState.SAVED else status.status
    return status.model_copy(update={"has_unsaved_changes": True, "status": next_state})


def mark_saving(status: SaveStatus, *, has_changes: bool | None = None) -> SaveStatus:
    update: dict[str, Any] = {"status": SaveState.SAVING}
    if has_changes is not None:
        update["has_unsaved_changes"] = has_changes
    return status.model_copy(update=update)


def mark_saved(
    status: SaveStatus,
    *,
    version: int | None,
    auto: bool = False,
    still_pending: bool = False,
    now: datetime | None = None,
) -> SaveStatus:
    """Successful save or publish.

    ``still_pending`` is set when newer edits arrived while the request was in
    flight; those edits keep the status at ``unsaved``.
    """
    now = now or utcnow()
    update: dict[str, Any] = {
        "status": SaveState.UNSAVED if still_pending else SaveState.SAVED,
        "has_unsaved_changes": still_pending,
        "error": None,
        "conflict_id": None,
    }
    if version is not None:
        update["version"] = max(0, int(version))
    update["last_auto_save" if auto else "last_saved"] = now
    return status.model_copy(update=update)


def mark_conflict(status: SaveStatus, conflict_id: str | None, message: str) -> SaveStatus:
    return status.model_copy(
        update={"status": SaveState.CONFLICT, "conflict_id": conflict_id, "error": message}
    )


def mark_error(status: SaveStatus, message: str) -> SaveStatus:
    return status.model_copy(update={"status": SaveState.ERROR, "error": message})


def mark_recovered(status: SaveStatus, version: int) -> SaveStatus:
    return status.model_copy(
        update={
            "status": SaveState.UNSAVED,
            "has_unsaved_changes": True,
            "version": max(0, int(version)),
        }
    )


def reset(status: SaveStatus) -> SaveStatus:
    return status.model_copy(
        update={"status": SaveState.SAVED, "has_unsaved_changes": False, "error": None}
    )


def set_saving(status: SaveStatus, saving: bool) -> SaveStatus:
    """Manual override; only the status field changes."""
    if saving:
        next_state = SaveState.SAVING
    elif status.has_unsaved_changes:
        next_state = SaveState.UNSAVED
    else:
        next_state = SaveState.SAVED
    return status.model_copy(update={"status": next_state})
