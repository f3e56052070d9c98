from __future__ import annotations

import pytest

from wellwork.client.http import ApiError
from wellwork.client.notes import NotAuthenticatedError, is_temporary_id
from wellwork.client.reconciler import DEGRADED


def _go_offline(client, flaky) -> None:
    flaky.online = False
    client.monitor.check_now()
    assert client.reconciler.state == DEGRADED


def test_online_save_writes_through_cache(client) -> None:
    notes = client.notes.save("2024-06-01", "  leche ")
    assert notes[0]["content"] == "leche"
    assert client.cache.load(client.session.user_id()) == notes
    assert len(client.queue) == 0


def test_client_validation_runs_before_network(client, flaky) -> None:
    before = len(flaky.calls)
    with pytest.raises(ValueError):
        client.notes.save("2024/06/01", "x")
    with pytest.raises(ValueError):
        client.notes.save("2024-06-01", "   ")
    assert len(flaky.calls) == before


def test_client_error_is_surfaced_without_local_change(client, flaky) -> None:
    flaky.fail_status = 400
    with pytest.raises(ApiError) as exc:
        client.notes.save("2024-06-01", "x")
    assert exc.value.status_code == 400
    assert client.cache.load(client.session.user_id()) == []
    assert len(client.queue) == 0


def test_server_error_falls_back_to_queue(client, flaky) -> None:
    flaky.fail_status = 503
    notes = client.notes.save("2024-06-01", "x")
    assert is_temporary_id(notes[0]["id"])
    assert [op.describe() for op in client.queue.peek_all()] == ["POST /api/notes"]


def test_offline_update_keeps_existing_id(client, flaky) -> None:
    real_id = client.notes.save("2024-06-01", "v1")[0]["id"]
    _go_offline(client, flaky)

    notes = client.notes.save("2024-06-01", "v2")
    assert [(n["id"], n["content"]) for n in notes] == [(real_id, "v2")]
    assert client.queue.peek_all()[0].body == {"date": "2024-06-01", "content": "v2"}


def test_deleting_temporary_note_cancels_its_pending_create(client, flaky) -> None:
    _go_offline(client, flaky)
    temp = client.notes.save("2024-06-01", "x")[0]
    client.notes.save("2024-06-05", "otra")

    remaining = client.notes.delete(temp["id"])
    assert [n["date"] for n in remaining] == ["2024-06-05"]
    assert [op.body["date"] for op in client.queue.peek_all()] == ["2024-06-05"]


def test_offline_delete_is_replayed(api, client, flaky) -> None:
    note = client.notes.save("2024-06-01", "x")[0]
    _go_offline(client, flaky)

    assert client.notes.delete(note["id"]) == []
    assert [op.describe() for op in client.queue.peek_all()] == [f"DELETE /api/notes/{note['id']}"]

    flaky.online = True
    client.monitor.check_now()
    assert len(client.queue) == 0
    headers = {"Authorization": f"Bearer {client.session.token()}"}
    assert api.get("/api/notes", headers=headers).json() == []


def test_replayed_delete_of_missing_note_counts_as_done(api, client, flaky) -> None:
    note = client.notes.save("2024-06-01", "x")[0]
    _go_offline(client, flaky)
    client.notes.delete(note["id"])
    # otro dispositivo ya la borró
    headers = {"Authorization": f"Bearer {client.session.token()}"}
    assert api.delete(f"/api/notes/{note['id']}", headers=headers).status_code == 200

    flaky.online = True
    client.monitor.check_now()
    assert len(client.queue) == 0
    assert client.reconciler.last_report.replayed == 1


def test_delete_unknown_note_offline(client, flaky) -> None:
    _go_offline(client, flaky)
    with pytest.raises(LookupError):
        client.notes.delete("no-existe")


def test_reads_fall_back_to_cache(client, flaky) -> None:
    client.notes.save("2024-06-01", "x")
    flaky.online = False
    # primer fallo de red: se sirve la caché y el monitor pasa a offline
    assert [n["content"] for n in client.notes.load_notes()] == ["x"]
    assert client.reconciler.state == DEGRADED
    assert client.notes.note_for_date("2024-06-01")["content"] == "x"
    assert client.notes.note_for_date("2024-06-02") is None


def test_requires_session(make_client) -> None:
    anonymous = make_client()
    with pytest.raises(NotAuthenticatedError):
        anonymous.notes.load_notes()


def test_logout_clears_session_and_queue_but_keeps_cache(client, flaky) -> None:
    user_id = client.session.user_id()
    client.notes.save("2024-06-01", "x")
    _go_offline(client, flaky)
    client.notes.save("2024-06-02", "y")

    client.logout()
    assert client.session.load() is None
    assert len(client.queue) == 0
    assert len(client.cache.load(user_id)) == 2


def test_login_as_other_user_drops_foreign_queue(client, flaky) -> None:
    client.register("beto", "secreto2")
    _go_offline(client, flaky)
    client.notes.save("2024-06-02", "de ana")
    flaky.online = True

    client.login("beto", "secreto2")
    assert len(client.queue) == 0
    assert client.user["username"] == "beto"
