from __future__ import annotations

import json

import pytest

from wellwork.infrastructure.db.json_store import JsonStore


def test_missing_file_is_created_empty(tmp_path) -> None:
    store = JsonStore(tmp_path / "sub" / "notes.json")
    assert store.read() == []
    assert json.loads(store.path.read_text(encoding="utf-8")) == []


def test_empty_file_reads_as_empty_list(tmp_path) -> None:
    path = tmp_path / "user.json"
    path.write_text("   ", encoding="utf-8")
    assert JsonStore(path).read() == []


def test_corrupted_file_is_reset(tmp_path) -> None:
    path = tmp_path / "notes.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonStore(path)
    assert store.read() == []
    assert path.read_text(encoding="utf-8") == "[]"


def test_non_list_payload_is_ignored(tmp_path) -> None:
    path = tmp_path / "notes.json"
    path.write_text('{"id": 1}', encoding="utf-8")
    assert JsonStore(path).read() == []


def test_write_then_read(tmp_path) -> None:
    store = JsonStore(tmp_path / "notes.json")
    store.write([{"id": "a", "content": "café"}])
    assert store.read() == [{"id": "a", "content": "café"}]
    # sin temporales huérfanos
    assert [p.name for p in tmp_path.iterdir()] == ["notes.json"]


def test_edit_persists_only_on_success(tmp_path) -> None:
    store = JsonStore(tmp_path / "notes.json")
    with store.edit() as items:
        items.append({"id": "a"})
    assert store.read() == [{"id": "a"}]

    with pytest.raises(RuntimeError):
        with store.edit() as items:
            items.append({"id": "b"})
            raise RuntimeError("boom")
    assert store.read() == [{"id": "a"}]


def test_undecodable_file_is_reset(tmp_path) -> None:
    path = tmp_path / "user.json"
    path.write_bytes(b"\xff\xfe\x00")
    assert JsonStore(path).read() == []
    assert path.read_text(encoding="utf-8") == "[]"
