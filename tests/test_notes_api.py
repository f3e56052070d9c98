from __future__ import annotations


def test_list_starts_empty(api, headers) -> None:
    r = api.get("/api/notes", headers=headers)
    assert r.status_code == 200
    assert r.json() == []


def test_upsert_by_date(api, headers) -> None:
    r = api.post("/api/notes", json={"date": "2024-06-01", "content": "  comprar leche "}, headers=headers)
    assert r.status_code == 201
    notes = r.json()
    assert len(notes) == 1
    first = notes[0]
    assert first["content"] == "comprar leche"
    assert set(first) == {"id", "userId", "date", "content", "createdAt", "updatedAt"}

    r = api.post("/api/notes", json={"date": "2024-06-01", "content": "comprar pan"}, headers=headers)
    notes = r.json()
    assert len(notes) == 1
    assert notes[0]["id"] == first["id"]
    assert notes[0]["content"] == "comprar pan"
    assert notes[0]["createdAt"] == first["createdAt"]


def test_create_validation(api, headers) -> None:
    assert api.post("/api/notes", json={"content": "x"}, headers=headers).status_code == 400
    assert api.post("/api/notes", json={"date": "2024-06-01", "content": "   "}, headers=headers).status_code == 400
    r = api.post("/api/notes", json={"date": "01/06/2024", "content": "x"}, headers=headers)
    assert r.status_code == 400
    assert "YYYY-MM-DD" in r.json()["message"]


def test_update_and_delete(api, headers) -> None:
    note = api.post("/api/notes", json={"date": "2024-06-01", "content": "a"}, headers=headers).json()[0]

    r = api.put(f"/api/notes/{note['id']}", json={"content": "b"}, headers=headers)
    assert r.status_code == 200
    assert r.json()[0]["content"] == "b"
    assert api.put(f"/api/notes/{note['id']}", json={"content": ""}, headers=headers).status_code == 400
    assert api.put("/api/notes/no-existe", json={"content": "b"}, headers=headers).status_code == 404

    r = api.delete(f"/api/notes/{note['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json() == []
    assert api.delete(f"/api/notes/{note['id']}", headers=headers).status_code == 404


def test_notes_are_scoped_per_user(api, signup, headers) -> None:
    api.post("/api/notes", json={"date": "2024-06-01", "content": "de ana"}, headers=headers)
    other = {"Authorization": f"Bearer {signup('beto', 'secreto2')['token']}"}

    assert api.get("/api/notes", headers=other).json() == []
    ana_note = api.get("/api/notes", headers=headers).json()[0]
    assert api.delete(f"/api/notes/{ana_note['id']}", headers=other).status_code == 404

    api.post("/api/notes", json={"date": "2024-06-01", "content": "de beto"}, headers=other)
    assert api.get("/api/notes", headers=headers).json()[0]["content"] == "de ana"


def test_undecodable_notes_file_does_not_break_listing(api, headers) -> None:
    from wellwork.core.config import settings

    settings.notes_path.write_bytes(b"\xff\xfe\x00")
    r = api.get("/api/notes", headers=headers)
    assert r.status_code == 200
    assert r.json() == []
