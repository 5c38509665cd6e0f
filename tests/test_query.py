from datetime import datetime, timedelta, UTC

from smartnotes.models import Note
from smartnotes.query import FilterState, distinct_tags, project

T0 = datetime(2026, 1, 1, tzinfo=UTC)


def note(title="", body="", tags=None, pinned=False, minutes=0):
    ts = T0 + timedelta(minutes=minutes)
    return Note(title=title, body=body, tags=tags, pinned=pinned, created_at=T0, updated_at=ts)


def titles(items):
    return [it.note.title for it in items]


def test_empty_collection():
    p = project([], FilterState())
    assert p.pinned == [] and p.unpinned == []
    assert p.empty


def test_search_is_case_insensitive_over_title_and_body():
    notes = [note("Team Meeting"), note("other", body="unrelated")]
    p = project(notes, FilterState(query="meeting"))
    assert titles(p.unpinned) == ["Team Meeting"]
    p = project(notes, FilterState(query="UNREL"))
    assert titles(p.unpinned) == ["other"]


def test_tag_filter_is_exact():
    notes = [note("a", tags="work"), note("b", tags="Work"), note("c", tags="workshop")]
    assert titles(project(notes, FilterState(tag="work")).unpinned) == ["a"]


def test_filters_combine():
    notes = [note("plan", tags="work"), note("plan", tags="home"), note("other", tags="work")]
    p = project(notes, FilterState(query="plan", tag="work"))
    assert [it.index for it in p.unpinned] == [0]


def test_no_match_gives_empty_partitions():
    p = project([note("a"), note("b", pinned=True)], FilterState(query="zzz"))
    assert p.empty


def test_partitions_sorted_by_recency_with_stable_ties():
    notes = [
        note("old", minutes=1),
        note("pin-old", pinned=True, minutes=2),
        note("new", minutes=10),
        note("tie-a", minutes=5),
        note("pin-new", pinned=True, minutes=8),
        note("tie-b", minutes=5),
    ]
    p = project(notes)
    assert titles(p.pinned) == ["pin-new", "pin-old"]
    assert titles(p.unpinned) == ["new", "tie-a", "tie-b", "old"]
    for part in (p.pinned, p.unpinned):
        for a, b in zip(part, part[1:]):
            assert a.note.updated_at >= b.note.updated_at


def test_projected_items_carry_collection_index():
    notes = [note("a", minutes=1), note("b", minutes=3), note("c", pinned=True)]
    p = project(notes)
    assert [(it.index, it.note.title) for it in p.unpinned] == [(1, "b"), (0, "a")]
    assert p.pinned[0].index == 2
    assert p.pinned[0].note is notes[2]


def test_projection_is_deterministic():
    notes = [note(f"n{i}", tags=[str(i % 3)], pinned=i % 2 == 0, minutes=i % 4) for i in range(12)]
    f = FilterState(query="n", tag="1")
    assert project(notes, f) == project(notes, f)


def test_distinct_tags_sorted_unique_and_idempotent():
    notes = [note(tags="beta, alpha"), note(tags="alpha, gamma"), note(tags="")]
    tags = distinct_tags(notes)
    assert tags == ["alpha", "beta", "gamma"]
    assert distinct_tags(notes) == tags
    assert len(set(tags)) == len(tags)


def test_distinct_tags_ignore_case_when_ordering():
    assert distinct_tags([note(tags="Banana, apple, cherry")]) == ["apple", "Banana", "cherry"]


def test_distinct_tags_lowercase_first_on_case_ties():
    assert distinct_tags([note(tags="work, Work, personal")]) == ["personal", "work", "Work"]


def test_distinct_tags_not_cached():
    notes = [note(tags="a")]
    assert distinct_tags(notes) == ["a"]
    notes.append(note(tags="b"))
    assert distinct_tags(notes) == ["a", "b"]
