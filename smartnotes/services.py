from __future__ import annotations
import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Optional

from . import config
from .exceptions import NotesImportError
from .models import Note, normal_body, normal_title, parse_tags, utcnow
from .storage import Persistence

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


class NoteStore:
    """
    The authoritative note collection. A note's identity is its index in
    ``notes`` at the time of the call. Every mutation saves the whole
    collection before returning; a failed save raises PersistenceError and
    leaves the in-memory change in place.
    """

    def __init__(self, persistence: Persistence, clock: Callable[[], datetime] = utcnow):
        self.persistence = persistence
        self.clock = clock
        self.notes: list[Note] = persistence.load_notes()
        logger.debug("loaded %d notes", len(self.notes))

    def _persist(self) -> None:
        self.persistence.save_notes(self.notes)

    def get(self, index: int) -> Optional[Note]:
        if isinstance(index, int) and 0 <= index < len(self.notes):
            return self.notes[index]
        return None

    def create(
        self,
        title: Any = None,
        body: Any = None,
        tags: Any = None,
        pinned: Any = False,
    ) -> Note:
        now = self.clock()
        note = Note(title=title, body=body, tags=tags, pinned=pinned, created_at=now, updated_at=now)
        self.notes.append(note)
        logger.info("created note %d: %s", len(self.notes) - 1, note.title)
        self._persist()
        return note

    def update(self, index: int, *, title: Any, body: Any, tags: Any) -> Optional[Note]:
        """Overwrite title, body and tags. Unknown index is a no-op."""
        note = self.get(index)
        if note is None:
            logger.info("update ignored, no note at %r", index)
            return None
        note.title = normal_title(title)
        note.body = normal_body(body)
        note.tags = parse_tags(tags)
        note.touch(self.clock())
        logger.info("updated note %d", index)
        self._persist()
        return note

    def delete(self, index: int, confirm: Confirm) -> bool:
        if self.get(index) is None:
            return False
        if not confirm(config.DELETE_PROMPT):
            return False
        removed = self.notes.pop(index)
        logger.info("deleted note %d: %s", index, removed.title)
        self._persist()
        return True

    def clear_all(self, confirm: Confirm) -> bool:
        if not confirm(config.CLEAR_ALL_PROMPT):
            return False
        self.notes = []
        logger.info("cleared all notes")
        self._persist()
        return True

    def toggle_pin(self, index: int) -> Optional[Note]:
        note = self.get(index)
        if note is None:
            return None
        note.pinned = not note.pinned
        note.touch(self.clock())
        logger.info("%s note %d", "pinned" if note.pinned else "unpinned", index)
        self._persist()
        return note

    def import_merge(self, records: Any) -> int:
        """Append one note per record. The root must be a list."""
        if not isinstance(records, list):
            raise NotesImportError(f"Invalid format: expected a list of notes, got {type(records).__name__}")
        now = self.clock()
        imported = [Note.from_record(r, now) for r in records]
        skipped = sum(1 for r in records if not isinstance(r, Mapping))
        if skipped:
            logger.warning("%d imported entries were not objects, defaults used", skipped)
        self.notes.extend(imported)
        logger.info("imported %d notes", len(imported))
        self._persist()
        return len(imported)

    def import_blob(self, text: str) -> int:
        try:
            records = json.loads(text)
        except ValueError as e:
            raise NotesImportError(f"Invalid JSON: {e}") from e
        return self.import_merge(records)

    def export_all(self) -> str:
        return json.dumps([n.to_record() for n in self.notes], indent=2, ensure_ascii=False)

