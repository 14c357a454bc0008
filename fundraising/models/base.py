"""Base model classes shared by all entity schemas."""

import secrets
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str | None = None) -> str:
    """UUID4 string, or a short `<prefix>_<token>` id for prefixed record types."""
    if prefix is None:
        return str(uuid.uuid4())
    return f"{prefix}_{secrets.token_hex(8)}"


class CamelModel(BaseModel):
    """snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Entity(CamelModel):
    """Abstract base for CRUD entities: string id plus timestamps."""

    id: str
    created_at: datetime
    updated_at: datetime

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
