import pytest

from smartnotes.db import init_db, reset_engine
from smartnotes.services import NoteStore
from smartnotes.storage import MemoryBlobStore, Persistence


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setenv("SMARTNOTES_DB_PATH", str(tmp_path / "notes.sqlite"))
    reset_engine()
    init_db()
    yield tmp_path / "notes.sqlite"
    reset_engine()


@pytest.fixture
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def store(blobs) -> NoteStore:
    return NoteStore(Persistence(blobs))

