"""Error taxonomy shared by the entity services and the draft workflow."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiError(BaseModel):
    """Error object inside the draft store's response envelope."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    code: str | None = None
    message: str | None = None
    details: Any = None
    conflict_id: str | None = None


class ApiEnvelope(BaseModel):
    """Standard `{success, data, error}` envelope returned by every endpoint."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    data: Any = None
    message: str | None = None
    error: ApiError | None = None


class ValidationFailedError(ValueError):
    """One or more field rules were violated. Never reaches the network."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")

    @property
    def message(self) -> str:
        return str(self)


class DraftStoreError(RuntimeError):
    """Transport or generic failure talking to the remote draft store."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DraftConflictError(DraftStoreError):
    """HTTP 409: the stored version collided with ours."""

    def __init__(self, conflict_id: str | None, message: str = "Conflict detected") -> None:
        self.conflict_id = conflict_id
        super().__init__(message, status_code=409)


class DraftNotFoundError(DraftStoreError):
    def __init__(self, message: str = "No draft found to publish") -> None:
        super().__init__(message, status_code=404)
