from __future__ import annotations
import logging
from collections.abc import Mapping
from datetime import datetime, UTC
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .config import DEFAULT_TITLE

logger = logging.getLogger(__name__)

# epoch values above this are taken to be milliseconds
_EPOCH_MS_THRESHOLD = 10**11


def utcnow() -> datetime:
    return datetime.now(UTC)


def normal_title(value: Any) -> str:
    if value is None:
        return DEFAULT_TITLE
    title = str(value).strip()
    return title or DEFAULT_TITLE


def normal_body(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_tags(value: Any) -> list[str]:
    """
    Normalize tags from a comma separated string or a list of strings.
    Entries are trimmed, empties dropped, and exact (case-sensitive)
    duplicates collapsed, keeping the first occurrence.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return []
    out: list[str] = []
    for item in items:
        if item is None or isinstance(item, (dict, list, tuple)):
            continue
        tag = str(item).strip()
        if tag and tag not in out:
            out.append(tag)
    return out


def coerce_timestamp(value: Any) -> Optional[datetime]:
    """Best-effort conversion to an aware UTC datetime; None when impossible."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    ts: Optional[datetime] = None
    try:
        if isinstance(value, datetime):
            ts = value
        elif isinstance(value, (int, float)):
            seconds = value / 1000 if abs(value) > _EPOCH_MS_THRESHOLD else value
            ts = datetime.fromtimestamp(seconds, UTC)
        elif isinstance(value, str):
            ts = datetime.fromisoformat(value.strip())
        if ts is not None:
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=UTC)
            # out of range once shifted to UTC near year 1 or 9999
            ts = ts.astimezone(UTC)
    except (OverflowError, OSError, ValueError):
        ts = None
    if ts is None:
        logger.warning("unreadable timestamp %.80r, using current time", value)
    return ts


class Note(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = DEFAULT_TITLE
    body: str = ""
    tags: list[str] = Field(default_factory=list)
    pinned: bool = False
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return normal_title(v)

    @field_validator("body", mode="before")
    @classmethod
    def _body(cls, v: Any) -> str:
        return normal_body(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, v: Any) -> list[str]:
        return parse_tags(v)

    @field_validator("pinned", mode="before")
    @classmethod
    def _pinned(cls, v: Any) -> bool:
        return bool(v)

    @model_validator(mode="after")
    def _ordered_timestamps(self) -> "Note":
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
        return self

    @classmethod
    def from_record(cls, record: Any, now: Optional[datetime] = None) -> "Note":
        """
        Build a note from an untyped record (imported or persisted).
        Missing or malformed fields are defaulted, never rejected.
        """
        now = now or utcnow()
        data = record if isinstance(record, Mapping) else {}
        created = coerce_timestamp(data.get("createdAt")) or now
        updated = coerce_timestamp(data.get("updatedAt")) or now
        return cls(
            title=data.get("title"),
            body=data.get("body"),
            tags=data.get("tags"),
            pinned=data.get("pinned"),
            created_at=created,
            updated_at=updated,
        )

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def touch(self, now: Optional[datetime] = None) -> None:
        # never move updated_at backwards
        self.updated_at = max(now or utcnow(), self.updated_at)
