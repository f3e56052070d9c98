from __future__ import annotations

from wellwork.client.queue import PendingOperationQueue
from wellwork.client.storage import LocalStorage, NotesCache, SessionCache, user_key


def test_get_item_missing_or_corrupt_returns_default(tmp_path) -> None:
    storage = LocalStorage(tmp_path)
    assert storage.get_item("nada", []) == []
    (tmp_path / "roto.json").write_text("{", encoding="utf-8")
    assert storage.get_item("roto", "def") == "def"


def test_notes_cache_is_per_user(tmp_path) -> None:
    cache = NotesCache(LocalStorage(tmp_path))
    notes = [{"id": "1", "date": "2024-06-01", "content": "leche"}]
    assert cache.save("u1", notes)
    assert cache.load("u1") == notes
    assert cache.load("u2") == []
    assert (tmp_path / f"{user_key('u1', 'notes')}.json").exists()

    cache.clear("u1")
    assert cache.load("u1") == []


def test_notes_cache_survives_garbage(tmp_path) -> None:
    storage = LocalStorage(tmp_path)
    storage.set_item(user_key("u1", "notes"), {"no": "lista"})
    cache = NotesCache(storage)
    assert cache.load("u1") == []
    storage.set_item(user_key("u1", "notes"), [{"id": "1"}, "basura", 3])
    assert cache.load("u1") == [{"id": "1"}]


def test_session_cache(tmp_path) -> None:
    session = SessionCache(LocalStorage(tmp_path))
    assert session.load() is None and session.token() is None

    session.save({"token": "t", "user": {"id": "u1", "username": "ana"}})
    assert session.token() == "t"
    assert session.user_id() == "u1"

    session.save({"token": "", "user": {"id": "u1"}})
    assert session.load() is None

    session.clear()
    assert session.user_id() is None


def test_undecodable_bytes_degrade_to_empty(tmp_path) -> None:
    storage = LocalStorage(tmp_path)
    (tmp_path / f"{user_key('u1', 'notes')}.json").write_bytes(b"\xff\xfe[basura")
    assert NotesCache(storage).load("u1") == []

    (tmp_path / "wellwork_sync_queue.json").write_bytes(b"\x80\x81")
    queue = PendingOperationQueue(storage)
    assert queue.peek_all() == []
    assert len(queue) == 0
