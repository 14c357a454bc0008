"""Deal room auto-save controller.

Owns one editor's ``SaveStatus`` and orchestrates debounced auto-save, manual
save, publish, conflict detection and crash recovery against the remote draft
store. State changes go through the pure transitions in ``state``; every
network operation returns a ``SaveOutcome`` and mirrors it to the optional
callbacks.

Usage:
    store = DraftStoreClient(project_id, session_id)
    async with AutoSaveController(store, validate_before_save=validate_deal_room) as ctl:
        recovered = await ctl.initialize()
        await ctl.save_draft({"investmentBlurb": "..."}, is_auto_save=True)
"""

from __future__ import annotations

import asyncio
import copy
import inspect
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError

from fundraising.core.config import settings
from fundraising.core.errors import DraftConflictError, DraftStoreError, ValidationFailedError
from fundraising.models.enums import OutcomeKind, SaveState
from fundraising.modules.drafts import state
from fundraising.modules.drafts.client import UNKNOWN_ERROR, DraftStoreClient
from fundraising.modules.drafts.schemas import (
    DraftData,
    DraftValidator,
    RecoveredDraft,
    SaveOutcome,
    SaveStatus,
)
from fundraising.services.debounce import Debouncer

logger = structlog.get_logger()


def _version(value: Any) -> int | None:
    """Integer version from a save or publish payload; publish nests it one level."""
    if isinstance(value, dict):
        value = value.get("version")
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


class AutoSaveController:
    def __init__(
        self,
        store: DraftStoreClient,
        *,
        auto_save_interval: float | None = None,
        enable_auto_save: bool | None = None,
        validate_before_save: DraftValidator | None = None,
        on_save_success: Callable[[Any], Any] | None = None,
        on_save_error: Callable[[str], Any] | None = None,
        on_conflict_detected: Callable[[str | None], Any] | None = None,
    ) -> None:
        self.store = store
        self.enable_auto_save = (
            settings.ENABLE_AUTO_SAVE if enable_auto_save is None else enable_auto_save
        )
        self.validate_before_save = validate_before_save
        self.on_save_success = on_save_success
        self.on_save_error = on_save_error
        self.on_conflict_detected = on_conflict_detected

        interval = settings.auto_save_interval if auto_save_interval is None else auto_save_interval
        self._debouncer = Debouncer(interval, name="draft.auto_save")
        self._save_lock = asyncio.Lock()
        self._status = state.initial_status()
        self._pending: DraftData | None = None
        self._initialized = False
        self._callback_tasks: set[asyncio.Task[Any]] = set()

    async def __aenter__(self) -> "AutoSaveController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ── Read-only view ───────────────────────────────────────────────────────

    @property
    def save_status(self) -> SaveStatus:
        return self._status

    @property
    def has_unsaved_changes(self) -> bool:
        return self._status.has_unsaved_changes

    @property
    def last_saved(self) -> datetime | None:
        return self._status.last_saved

    @property
    def error(self) -> str | None:
        return self._status.error

    @property
    def pending_data(self) -> DraftData | None:
        return self._pending

    @property
    def auto_save_armed(self) -> bool:
        return self._debouncer.armed

    # ── Lifecycle ────────────────────────────────────────────────────────────

    async def initialize(self) -> DraftData | None:
        """Fetch remote status and recover a prior session's draft, once.

        Never raises; failures leave the defaults in place. Returns the
        recovered draft payload so the caller can merge it into the editor.
        """
        if self._initialized or not self.store.project_id:
            return None
        self._initialized = True
        remote, recovered = await asyncio.gather(
            self._fetch_remote_status(),
            self._fetch_recoverable(),
        )
        # A recovered draft overrides the stored status
        if remote is not None:
            try:
                self._status = state.merge_remote_status(self._status, remote)
            except ValidationError as exc:
                logger.warning(
                    "draft.status_invalid", project_id=self.store.project_id, error=str(exc)
                )
        return self._apply_recovered(recovered)

    async def aclose(self) -> None:
        self._debouncer.cancel()
        if self._callback_tasks:
            await asyncio.gather(*list(self._callback_tasks), return_exceptions=True)

    async def wait_for_auto_save(self) -> None:
        """Wait until the armed auto-save (if any) has fired and finished."""
        await self._debouncer.wait()

    # ── Operations ───────────────────────────────────────────────────────────

    async def save_draft(self, data: DraftData, is_auto_save: bool = False) -> SaveOutcome | None:
        # Pending data never aliases the caller's buffer
        snapshot = copy.deepcopy(data)
        if is_auto_save:
            self._pending = snapshot
            self._status = state.mark_pending(self._status)
            if self.enable_auto_save:
                self._debouncer.arm(self._perform_auto_save)
            return None

        self._debouncer.cancel()
        self._pending = snapshot
        self._status = state.mark_saving(self._status, has_changes=True)
        async with self._save_lock:
            return await self._save(snapshot, auto=False)

    async def publish_draft(self, change_description: str | None = None) -> SaveOutcome:
        self._debouncer.cancel()
        self._status = state.mark_saving(self._status)
        async with self._save_lock:
            try:
                result = await self.store.publish_draft(change_description)
            except DraftConflictError as exc:
                return self._conflict(exc)
            except DraftStoreError as exc:
                return self._fail(exc.message)
            except Exception as exc:
                logger.error("draft.publish_crashed", project_id=self.store.project_id, exc_info=True)
                return self._fail(str(exc) or UNKNOWN_ERROR)

            self._pending = None
            self._status = state.mark_saved(self._status, version=_version(result.get("version")))
            logger.info(
                "draft.published",
                project_id=self.store.project_id,
                version=self._status.version,
            )
            return self._succeed(result)

    async def recover_unsaved_changes(self) -> DraftData | None:
        return self._apply_recovered(await self._fetch_recoverable())

    def clear_draft(self) -> None:
        """Drop local edits and any armed auto-save. The remote draft is untouched."""
        self._pending = None
        self._debouncer.cancel()
        self._status = state.reset(self._status)

    def set_saving(self, saving: bool) -> None:
        self._status = state.set_saving(self._status, saving)

    # ── Internals ────────────────────────────────────────────────────────────

    async def _fetch_remote_status(self) -> dict[str, Any] | None:
        try:
            return await self.store.fetch_save_status()
        except Exception as exc:
            logger.warning(
                "draft.status_fetch_failed", project_id=self.store.project_id, error=str(exc)
            )
            return None

    async def _fetch_recoverable(self) -> RecoveredDraft | None:
        try:
            return await self.store.fetch_recoverable_draft()
        except Exception as exc:
            logger.warning(
                "draft.recovery_failed", project_id=self.store.project_id, error=str(exc)
            )
            return None

    def _apply_recovered(self, recovered: RecoveredDraft | None) -> DraftData | None:
        if recovered is None:
            return None
        self._status = state.mark_recovered(self._status, recovered.version)
        logger.info(
            "draft.recovered", project_id=self.store.project_id, version=recovered.version
        )
        return recovered.draft_data

    async def _perform_auto_save(self) -> None:
        if self._pending is None:
            return
        if self._save_lock.locked() or self._status.status == SaveState.SAVING:
            # A save is in flight; try again after another interval
            self._debouncer.arm(self._perform_auto_save)
            return
        async with self._save_lock:
            data = self._pending
            self._status = state.mark_saving(self._status)
            await self._save(data, auto=True)

    async def _save(self, data: DraftData, *, auto: bool) -> SaveOutcome:
        if self.validate_before_save is not None:
            validation = self.validate_before_save(data)
            if not validation.is_valid:
                return self._fail(str(ValidationFailedError(validation.errors)))

        try:
            result = await self.store.save_draft(data, is_auto_save=auto)
        except DraftConflictError as exc:
            return self._conflict(exc)
        except DraftStoreError as exc:
            return self._fail(exc.message)
        except Exception as exc:
            logger.error("draft.save_crashed", project_id=self.store.project_id, exc_info=True)
            return self._fail(str(exc) or UNKNOWN_ERROR)

        still_pending = self._pending is not None and self._pending is not data
        if not still_pending:
            self._pending = None
        self._status = state.mark_saved(
            self._status,
            version=_version(result.get("version")),
            auto=auto,
            still_pending=still_pending,
        )
        return self._succeed(result)

    def _succeed(self, data: dict[str, Any]) -> SaveOutcome:
        outcome = SaveOutcome(kind=OutcomeKind.SUCCESS, data=data)
        self._dispatch(self.on_save_success, data)
        return outcome

    def _fail(self, message: str) -> SaveOutcome:
        self._status = state.mark_error(self._status, message)
        logger.warning("draft.save_failed", project_id=self.store.project_id, error=message)
        self._dispatch(self.on_save_error, message)
        return SaveOutcome(kind=OutcomeKind.ERROR, error=message)

    def _conflict(self, exc: DraftConflictError) -> SaveOutcome:
        self._status = state.mark_conflict(self._status, exc.conflict_id, exc.message)
        logger.warning(
            "draft.conflict_detected",
            project_id=self.store.project_id,
            conflict_id=exc.conflict_id,
        )
        self._dispatch(self.on_conflict_detected, exc.conflict_id)
        return SaveOutcome(kind=OutcomeKind.CONFLICT, conflict_id=exc.conflict_id, error=exc.message)

    def _dispatch(self, callback: Callable[[Any], Any] | None, arg: Any) -> None:
        if callback is None:
            return
        result = callback(arg)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._callback_tasks.add(task)
            task.add_done_callback(self._callback_done)

    def _callback_done(self, task: asyncio.Task[Any]) -> None:
        self._callback_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "draft.callback_failed",
                project_id=self.store.project_id,
                exc_info=task.exception(),
            )
