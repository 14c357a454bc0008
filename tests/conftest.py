"""Shared fixtures: an in-process fake of the remote draft store."""

import asyncio
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from fundraising.modules.drafts.client import DraftStoreClient

BASE_URL = "http://draft-store.test"
PROJECT_ID = "proj-1"
SESSION_ID = "session_abc123"


class FakeDraftStore:
    """Records requests and answers with canned or computed envelopes.

    Set ``save_reply``/``publish_reply``/``status_reply``/``recover_reply`` to a
    ``(status_code, body)`` tuple to override the default success responses.
    ``save_gate`` holds every save until it is set.
    """

    def __init__(self) -> None:
        self.version = 0
        self.saves: list[dict[str, Any]] = []
        self.publishes: list[dict[str, Any]] = []
        self.status_requests: list[str | None] = []
        self.recover_requests: list[str | None] = []
        self.save_reply: tuple[int, Any] | None = None
        self.publish_reply: tuple[int, Any] | None = None
        self.status_reply: tuple[int, Any] = (
            200,
            {
                "success": True,
                "data": {
                    "status": "saved",
                    "hasUnsavedChanges": False,
                    "version": 3,
                    "lastSaved": "2024-05-01T10:00:00Z",
                },
            },
        )
        self.recover_reply: tuple[int, Any] = (200, {"success": True, "data": None})
        self.save_gate: asyncio.Event | None = None

    @property
    def draft_posts(self) -> int:
        return len(self.saves)


def build_draft_store_app(store: FakeDraftStore) -> FastAPI:
    app = FastAPI()
    prefix = "/api/projects/{project_id}/deal-room"

    @app.get(f"{prefix}/save-status")
    async def save_status(project_id: str, sessionId: str | None = None):
        store.status_requests.append(sessionId)
        code, body = store.status_reply
        return JSONResponse(body, status_code=code)

    @app.get(f"{prefix}/recover-changes")
    async def recover_changes(project_id: str, sessionId: str | None = None):
        store.recover_requests.append(sessionId)
        code, body = store.recover_reply
        return JSONResponse(body, status_code=code)

    @app.post(f"{prefix}/draft")
    async def save_draft(project_id: str, request: Request):
        body = await request.json()
        store.saves.append(body)
        if store.save_gate is not None:
            await store.save_gate.wait()
        if store.save_reply is not None:
            code, reply = store.save_reply
            return JSONResponse(reply, status_code=code)
        store.version += 1
        return {
            "success": True,
            "data": {"version": store.version, "isAutoSave": body.get("isAutoSave")},
        }

    @app.post(f"{prefix}/draft/publish")
    async def publish_draft(project_id: str, request: Request):
        body = await request.json()
        store.publishes.append(body)
        if store.publish_reply is not None:
            code, reply = store.publish_reply
            return JSONResponse(reply, status_code=code)
        store.version += 1
        return {
            "success": True,
            "data": {"version": {"version": store.version, "projectId": project_id}},
        }

    return app


@pytest.fixture
def draft_store() -> FakeDraftStore:
    return FakeDraftStore()


@pytest.fixture
async def http_client(draft_store: FakeDraftStore) -> AsyncGenerator[AsyncClient]:
    app = build_draft_store_app(draft_store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
        yield ac


@pytest.fixture
def store_client(http_client: AsyncClient) -> DraftStoreClient:
    return DraftStoreClient(PROJECT_ID, SESSION_ID, base_url=BASE_URL, http_client=http_client)


def mock_store_client(handler: Callable[[httpx.Request], httpx.Response]) -> DraftStoreClient:
    """Draft store client whose transport is a plain request handler."""
    http = AsyncClient(transport=httpx.MockTransport(handler))
    return DraftStoreClient(PROJECT_ID, SESSION_ID, base_url=BASE_URL, http_client=http)
