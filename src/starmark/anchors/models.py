"""
The persisted anchor record.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..protocols import InteractiveElement


def _new_anchor_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Anchor(BaseModel):
    """A starred element plus the user's name and optional URL prefix.

    Serialized as ``{id, name, originalItem, customPrefix, timestamp}``.
    Unknown fields in stored records are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", validate_assignment=True)

    id: str = Field(default_factory=_new_anchor_id)
    name: str
    original: InteractiveElement = Field(alias="originalItem")
    custom_prefix: str = Field(default="", alias="customPrefix")
    created_at: datetime = Field(default_factory=_utcnow, alias="timestamp")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_legacy_id(cls, v: Any) -> Any:
        # Early records used a millisecond timestamp as the id
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("custom_prefix", mode="before")
    @classmethod
    def normalize_prefix(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Anchor:
        return cls.model_validate(record)
