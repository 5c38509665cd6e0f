from __future__ import annotations
import locale
from dataclasses import dataclass, field
from typing import Iterable

from .models import Note


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    tag: str = ""


@dataclass(frozen=True)
class ProjectedNote:
    index: int  # position in the collection, used to route intents back
    note: Note


@dataclass(frozen=True)
class Projection:
    pinned: list[ProjectedNote] = field(default_factory=list)
    unpinned: list[ProjectedNote] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.pinned and not self.unpinned


def matches_query(note: Note, query: str) -> bool:
    if not query:
        return True
    return query.lower() in f"{note.title} {note.body}".lower()


def matches_tag(note: Note, tag: str) -> bool:
    return not tag or tag in note.tags


def _by_recency(items: list[ProjectedNote]) -> list[ProjectedNote]:
    # sorted() is stable, so equal timestamps keep collection order
    return sorted(items, key=lambda it: it.note.updated_at, reverse=True)


def project(notes: Iterable[Note], filters: FilterState = FilterState()) -> Projection:
    """
    Filter notes by free text (case-insensitive, over title and body) and by
    exact tag, then split into pinned and unpinned lists, most recently
    updated first.
    """
    pinned: list[ProjectedNote] = []
    unpinned: list[ProjectedNote] = []
    for idx, note in enumerate(notes):
        if not (matches_query(note, filters.query) and matches_tag(note, filters.tag)):
            continue
        item = ProjectedNote(index=idx, note=note)
        if note.pinned:
            pinned.append(item)
        else:
            unpinned.append(item)
    return Projection(pinned=_by_recency(pinned), unpinned=_by_recency(unpinned))


def distinct_tags(notes: Iterable[Note]) -> list[str]:
    tags = {t for n in notes for t in n.tags}
    # case-insensitive first, then lowercase before uppercase like localeCompare
    return sorted(tags, key=lambda t: (locale.strxfrm(t.casefold()), t.swapcase()))
