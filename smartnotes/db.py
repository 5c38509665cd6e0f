from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Optional

from sqlmodel import Field, SQLModel, Session, create_engine

from . import config

logger = logging.getLogger(__name__)

_ENGINE = None
_ENGINE_URL = None  # track current engine's URL so we can switch when env changes


class Blob(SQLModel, table=True):
    """One named value of the key-value store."""

    __tablename__ = "kv_blobs"

    key: str = Field(primary_key=True)
    value: str = ""


def _compute_url() -> str:
    db_path = config.db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"

def get_engine():
    global _ENGINE, _ENGINE_URL
    url = _compute_url()
    if _ENGINE is None or _ENGINE_URL != url:
        # swap engine if URL changed (common in tests)
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = create_engine(url, echo=False)
        _ENGINE_URL = url
        logger.debug("using database %s", url)
    return _ENGINE

def reset_engine():
    """For tests: drop the cached engine so a new SMARTNOTES_DB_PATH is picked up."""
    global _ENGINE, _ENGINE_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _ENGINE_URL = None

def init_db():
    engine = get_engine()
    SQLModel.metadata.create_all(engine)

def get_session():
    # keep objects alive after commit so returned models retain values
    return Session(get_engine(), expire_on_commit=False)


@contextmanager
def session_scope():
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def read_blob(key: str) -> Optional[str]:
    with session_scope() as s:
        row = s.get(Blob, key)
        return row.value if row else None


def write_blob(key: str, value: str) -> None:
    with session_scope() as s:
        row = s.get(Blob, key)
        if row is None:
            row = Blob(key=key, value=value)
        else:
            row.value = value
        s.add(row)
