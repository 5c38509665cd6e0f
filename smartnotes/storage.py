"""
Persistence adapter: named JSON values on top of a synchronous blob store.

Two blob stores are provided. ``SQLiteBlobStore`` keeps blobs in the SQLite
database configured by ``SMARTNOTES_DB_PATH``; ``MemoryBlobStore`` keeps them
in a dict for headless use.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from . import config
from .db import init_db, read_blob, write_blob
from .exceptions import LoadCorruption, PersistenceError
from .models import Note

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, blob: str) -> None: ...


class MemoryBlobStore:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def set(self, key: str, blob: str) -> None:
        self.blobs[key] = blob


class SQLiteBlobStore:
    def __init__(self):
        init_db()

    def get(self, key: str) -> Optional[str]:
        return read_blob(key)

    def set(self, key: str, blob: str) -> None:
        write_blob(key, blob)


class Persistence:
    def __init__(self, blobs: BlobStore):
        self.blobs = blobs

    def _decode(self, key: str, raw: str, expect: type) -> Any:
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise LoadCorruption(f"{key}: {e}") from e
        if not isinstance(value, expect):
            raise LoadCorruption(f"{key}: expected {expect.__name__}, got {type(value).__name__}")
        return value

    def load(self, key: str, expect: type = object) -> Any:
        """Return the stored value, or None when absent or unreadable."""
        try:
            raw = self.blobs.get(key)
        except SQLAlchemyError as e:
            logger.warning("could not read %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return self._decode(key, raw, expect)
        except LoadCorruption as e:
            logger.warning("ignoring corrupt stored value: %s", e)
            return None

    def save(self, key: str, value: Any) -> None:
        blob = json.dumps(value, ensure_ascii=False)
        try:
            self.blobs.set(key, blob)
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"could not save {key}: {e}") from e
        logger.debug("saved %s (%d bytes)", key, len(blob))

    def load_notes(self) -> list[Note]:
        records = self.load(config.NOTES_KEY, expect=list) or []
        return [Note.from_record(r) for r in records]

    def save_notes(self, notes: list[Note]) -> None:
        self.save(config.NOTES_KEY, [n.to_record() for n in notes])

    def load_theme(self) -> str:
        theme = self.load(config.THEME_KEY, expect=str)
        return theme if theme in config.THEMES else config.DEFAULT_THEME

    def save_theme(self, theme: str) -> None:
        self.save(config.THEME_KEY, theme)
