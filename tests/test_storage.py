import json

import pytest
from sqlalchemy.exc import OperationalError

from smartnotes import config
from smartnotes.exceptions import PersistenceError
from smartnotes.models import Note
from smartnotes.storage import MemoryBlobStore, Persistence, SQLiteBlobStore


def test_missing_blob_loads_as_empty():
    p = Persistence(MemoryBlobStore())
    assert p.load("nothing") is None
    assert p.load_notes() == []
    assert p.load_theme() == "light"


@pytest.mark.parametrize("raw", ["{not json", '{"not": "an array"}', "42", '"text"'])
def test_corrupt_notes_blob_loads_as_empty(raw):
    p = Persistence(MemoryBlobStore({config.NOTES_KEY: raw}))
    assert p.load_notes() == []


def test_theme_falls_back_on_bad_value():
    p = Persistence(MemoryBlobStore({config.THEME_KEY: '"purple"'}))
    assert p.load_theme() == "light"
    p.save_theme("dark")
    assert p.load_theme() == "dark"


def test_save_then_load_notes(db):
    p = Persistence(SQLiteBlobStore())
    notes = [Note(title="a", tags="x, y"), Note(title="b", pinned=True)]
    p.save_notes(notes)
    assert Persistence(SQLiteBlobStore()).load_notes() == notes


def test_saved_blob_is_json_array():
    blobs = MemoryBlobStore()
    Persistence(blobs).save_notes([Note(title="a")])
    data = json.loads(blobs.blobs[config.NOTES_KEY])
    assert isinstance(data, list)
    assert data[0]["title"] == "a"


class FailingBlobStore(MemoryBlobStore):
    def set(self, key, blob):
        raise OperationalError("INSERT", {}, Exception("database or disk is full"))


def test_write_failure_raises_persistence_error():
    p = Persistence(FailingBlobStore())
    with pytest.raises(PersistenceError) as exc_info:
        p.save_notes([Note()])
    assert config.NOTES_KEY in str(exc_info.value)
