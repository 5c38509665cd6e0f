from smartnotes.db import Blob, get_session, read_blob, write_blob


def test_blob_roundtrip(db):
    s = get_session()
    s.add(Blob(key="hello", value="world"))
    s.commit()
    s.close()
    assert read_blob("hello") == "world"

    write_blob("hello", "again")
    assert read_blob("hello") == "again"
    assert read_blob("missing") is None
