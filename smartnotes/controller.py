"""
Application state and intent dispatch.

The controller owns everything that changes while the app runs: the note
store, the filter values, the theme and the draft form. Front ends never
touch those directly; they dispatch one of the intents below and redraw from
``Controller.view()``.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from . import config
from .dictation import DictationBridge, SpeechSource
from .exceptions import ValidationError
from .models import parse_tags
from .query import FilterState, Projection, distinct_tags, project
from .services import Confirm, NoteStore
from .storage import Persistence, SQLiteBlobStore

logger = logging.getLogger(__name__)


@dataclass
class Draft:
    title: str = ""
    tags: str = ""
    body: str = ""
    editing_index: Optional[int] = None


@dataclass(frozen=True)
class View:
    projection: Projection
    tags: list[str]
    filters: FilterState
    theme: str


# --- intents ---
@dataclass(frozen=True)
class Save:
    pass

@dataclass(frozen=True)
class BeginEdit:
    index: int

@dataclass(frozen=True)
class ClearDraft:
    pass

@dataclass(frozen=True)
class Delete:
    index: int

@dataclass(frozen=True)
class Pin:
    index: int

@dataclass(frozen=True)
class Search:
    query: str

@dataclass(frozen=True)
class FilterTag:
    tag: str

@dataclass(frozen=True)
class Import:
    blob: str

@dataclass(frozen=True)
class Export:
    pass

@dataclass(frozen=True)
class ClearAll:
    pass

@dataclass(frozen=True)
class ThemeToggle:
    pass


def _decline(prompt: str) -> bool:
    return False


@dataclass
class Controller:
    store: NoteStore
    confirm: Confirm = _decline
    filters: FilterState = field(default_factory=FilterState)
    theme: str = config.DEFAULT_THEME
    draft: Draft = field(default_factory=Draft)
    on_render: Optional[Callable[[View], None]] = None
    dictation: Optional[DictationBridge] = None

    def attach_dictation(self, source: Optional[SpeechSource]) -> DictationBridge:
        self.dictation = DictationBridge(source, self._write_body)
        return self.dictation

    def _write_body(self, text: str) -> None:
        self.draft.body = text

    def view(self) -> View:
        return View(
            projection=project(self.store.notes, self.filters),
            tags=distinct_tags(self.store.notes),
            filters=self.filters,
            theme=self.theme,
        )

    def dispatch(self, intent: Any) -> Any:
        """
        Run the handler for ``intent`` and redraw. Export returns the blob,
        Import returns the number of notes added, Save returns the saved note.
        """
        handler = _HANDLERS.get(type(intent))
        if handler is None:
            raise TypeError(f"unknown intent {intent!r}")
        try:
            result = handler(self, intent)
        except Exception:
            # redraw anyway, a failed save keeps its in-memory change
            self._render(failing=True)
            raise
        self._render()
        return result

    def _render(self, failing: bool = False) -> None:
        if self.on_render is None:
            return
        if not failing:
            self.on_render(self.view())
            return
        try:
            self.on_render(self.view())
        except Exception:
            logger.exception("render failed while handling an error")


def _save(c: Controller, intent: Save):
    d = c.draft
    title = d.title.strip()
    body = d.body.strip()
    if not title and not body:
        raise ValidationError("Please enter a title or note body.")
    tags = parse_tags(d.tags)
    if d.editing_index is not None:
        note = c.store.update(d.editing_index, title=title, body=body, tags=tags)
    else:
        note = c.store.create(title=title, body=body, tags=tags)
    c.draft = Draft()
    return note

def _begin_edit(c: Controller, intent: BeginEdit):
    note = c.store.get(intent.index)
    if note is None:
        return None
    c.draft = Draft(
        title=note.title,
        tags=", ".join(note.tags),
        body=note.body,
        editing_index=intent.index,
    )
    return note

def _clear_draft(c: Controller, intent: ClearDraft):
    c.draft = Draft()

def _delete(c: Controller, intent: Delete):
    deleted = c.store.delete(intent.index, c.confirm)
    if deleted and c.draft.editing_index is not None:
        # indexes after the removed note shift down
        if c.draft.editing_index == intent.index:
            c.draft = Draft()
        elif c.draft.editing_index > intent.index:
            c.draft.editing_index -= 1
    return deleted

def _pin(c: Controller, intent: Pin):
    return c.store.toggle_pin(intent.index)

def _search(c: Controller, intent: Search):
    c.filters = FilterState(query=intent.query or "", tag=c.filters.tag)

def _filter_tag(c: Controller, intent: FilterTag):
    c.filters = FilterState(query=c.filters.query, tag=intent.tag or "")

def _import(c: Controller, intent: Import):
    return c.store.import_blob(intent.blob)

def _export(c: Controller, intent: Export):
    return c.store.export_all()

def _clear_all(c: Controller, intent: ClearAll):
    cleared = c.store.clear_all(c.confirm)
    if cleared:
        c.draft = Draft()
    return cleared

def _theme_toggle(c: Controller, intent: ThemeToggle):
    c.theme = "light" if c.theme == "dark" else "dark"
    c.store.persistence.save_theme(c.theme)
    return c.theme


_HANDLERS: dict[type, Callable[[Controller, Any], Any]] = {
    Save: _save,
    BeginEdit: _begin_edit,
    ClearDraft: _clear_draft,
    Delete: _delete,
    Pin: _pin,
    Search: _search,
    FilterTag: _filter_tag,
    Import: _import,
    Export: _export,
    ClearAll: _clear_all,
    ThemeToggle: _theme_toggle,
}


def build_controller(
    persistence: Optional[Persistence] = None,
    confirm: Confirm = _decline,
    speech: Optional[SpeechSource] = None,
) -> Controller:
    """Load notes and theme from storage (SQLite by default) and wire a controller."""
    persistence = persistence or Persistence(SQLiteBlobStore())
    store = NoteStore(persistence)
    c = Controller(store=store, confirm=confirm, theme=persistence.load_theme())
    c.attach_dictation(speech)
    logger.debug("controller ready with %d notes, theme=%s", len(store.notes), c.theme)
    return c
