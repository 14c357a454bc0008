"""Tests for settings and the error types."""

import pytest
from pydantic import ValidationError

from fundraising.core.config import Settings
from fundraising.core.errors import (
    ApiEnvelope,
    DraftConflictError,
    DraftNotFoundError,
    ValidationFailedError,
)


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.AUTO_SAVE_INTERVAL_MS == 2000
        assert s.auto_save_interval == 2.0
        assert s.ENABLE_AUTO_SAVE is True
        assert s.DRAFT_REQUEST_TIMEOUT is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("AUTO_SAVE_INTERVAL_MS", "500")
        monkeypatch.setenv("ENABLE_AUTO_SAVE", "false")
        s = Settings(_env_file=None)
        assert s.auto_save_interval == 0.5
        assert s.ENABLE_AUTO_SAVE is False

    def test_production_requires_https(self):
        with pytest.raises(ValidationError, match="must use HTTPS"):
            Settings(_env_file=None, APP_ENV="production", API_URL="http://api.example.com")

    def test_production_allows_https_and_localhost(self):
        Settings(_env_file=None, APP_ENV="production", API_URL="https://api.example.com")
        Settings(_env_file=None, APP_ENV="production", API_URL="http://localhost:3001")


class TestErrors:
    def test_validation_failed_message(self):
        exc = ValidationFailedError(["a", "b"])
        assert str(exc) == "Validation failed: a, b"
        assert exc.errors == ["a", "b"]
        assert isinstance(exc, ValueError)

    def test_conflict_error(self):
        exc = DraftConflictError("conflict_1")
        assert exc.status_code == 409
        assert exc.conflict_id == "conflict_1"

    def test_not_found_message(self):
        assert DraftNotFoundError().message == "No draft found to publish"

    def test_envelope_parses_camel_case_error(self):
        env = ApiEnvelope.model_validate(
            {"success": False, "error": {"code": "CONFLICT", "conflictId": "c9"}}
        )
        assert env.error.conflict_id == "c9"
        assert env.data is None
