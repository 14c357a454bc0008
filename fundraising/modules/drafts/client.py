"""HTTP client for the deal room draft store."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from fundraising.core.config import settings
from fundraising.core.errors import (
    ApiEnvelope,
    DraftConflictError,
    DraftNotFoundError,
    DraftStoreError,
)
from fundraising.modules.drafts.schemas import (
    DraftData,
    PublishDraftRequest,
    RecoveredDraft,
    SaveDraftRequest,
)

logger = structlog.get_logger()

UNKNOWN_ERROR = "Unknown error occurred"


def _envelope(resp: httpx.Response) -> ApiEnvelope:
    try:
        return ApiEnvelope.model_validate(resp.json())
    except (ValueError, ValidationError):
        return ApiEnvelope()


class DraftStoreClient:
    """One project's draft endpoints, bound to one editing session.

    Pass ``http_client`` to share a connection pool or to route requests
    through a test transport; otherwise the client owns its own pool and
    must be closed with ``aclose``.
    """

    def __init__(
        self,
        project_id: str,
        session_id: str,
        *,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.project_id = project_id
        self.session_id = session_id
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.DRAFT_REQUEST_TIMEOUT
        )

    @property
    def deal_room_url(self) -> str:
        return f"{self.base_url}/api/projects/{self.project_id}/deal-room"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.deal_room_url}{path}"
        try:
            return await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(
                "draft_store.request_failed",
                method=method,
                path=path,
                project_id=self.project_id,
                error=str(exc),
            )
            raise DraftStoreError(str(exc) or UNKNOWN_ERROR) from exc

    # ── Reads ────────────────────────────────────────────────────────────────

    async def fetch_save_status(self) -> dict[str, Any] | None:
        """Remote status fields in wire format, or None when unavailable."""
        resp = await self._request("GET", "/save-status", params={"sessionId": self.session_id})
        if not resp.is_success:
            return None
        body = _envelope(resp)
        if not body.success or not isinstance(body.data, dict):
            return None
        return body.data

    async def fetch_recoverable_draft(self) -> RecoveredDraft | None:
        resp = await self._request("GET", "/recover-changes", params={"sessionId": self.session_id})
        if not resp.is_success:
            return None
        body = _envelope(resp)
        if not body.success or not body.data:
            return None
        return RecoveredDraft.model_validate(body.data)

    # ── Writes ───────────────────────────────────────────────────────────────

    async def save_draft(self, draft_data: DraftData, *, is_auto_save: bool) -> dict[str, Any]:
        payload = SaveDraftRequest(
            session_id=self.session_id, draft_data=draft_data, is_auto_save=is_auto_save
        )
        resp = await self._request("POST", "/draft", json=payload.model_dump(by_alias=True))
        body = _envelope(resp)

        if resp.status_code == 409:
            conflict_id = body.error.conflict_id if body.error else None
            raise DraftConflictError(conflict_id, "Conflict detected during save")
        if not resp.is_success:
            raise DraftStoreError("Failed to save draft", status_code=resp.status_code)
        if not body.success:
            message = body.error.message if body.error and body.error.message else None
            raise DraftStoreError(message or "Failed to save draft", status_code=resp.status_code)

        data = body.data if isinstance(body.data, dict) else {}
        logger.info(
            "draft_store.saved",
            project_id=self.project_id,
            auto=is_auto_save,
            version=data.get("version"),
        )
        return data

    async def publish_draft(self, change_description: str | None = None) -> dict[str, Any]:
        payload = PublishDraftRequest(
            session_id=self.session_id, change_description=change_description
        )
        resp = await self._request(
            "POST", "/draft/publish", json=payload.model_dump(by_alias=True, exclude_none=True)
        )
        body = _envelope(resp)

        if resp.status_code == 409:
            conflict_id = body.error.conflict_id if body.error else None
            raise DraftConflictError(conflict_id, "Conflict detected during publish")
        if resp.status_code == 404:
            raise DraftNotFoundError()
        if not resp.is_success:
            raise DraftStoreError("Failed to publish draft", status_code=resp.status_code)
        if not body.success:
            message = body.error.message if body.error and body.error.message else None
            raise DraftStoreError(message or "Failed to publish draft", status_code=resp.status_code)

        logger.info("draft_store.published", project_id=self.project_id)
        return body.data if isinstance(body.data, dict) else {}
