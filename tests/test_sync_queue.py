from __future__ import annotations

import pytest

from wellwork.client.http import ApiError, TransportError
from wellwork.client.queue import QUEUE_KEY, PendingOperation, PendingOperationQueue
from wellwork.client.storage import LocalStorage


@pytest.fixture
def queue(tmp_path) -> PendingOperationQueue:
    return PendingOperationQueue(LocalStorage(tmp_path), max_retries=5)


def _post(date: str) -> PendingOperation:
    return PendingOperation(method="POST", path="/api/notes", body={"date": date, "content": "x"})


def test_enqueue_persists_and_resets_retry_count(tmp_path, queue) -> None:
    op = queue.enqueue(_post("2024-06-01").model_copy(update={"retry_count": 3}))
    assert op.retry_count == 0

    reopened = PendingOperationQueue(LocalStorage(tmp_path))
    assert [o.body["date"] for o in reopened.peek_all()] == ["2024-06-01"]
    assert len(reopened) == 1


def test_drain_empty_queue_does_nothing(queue) -> None:
    calls = []
    result = queue.drain(calls.append)
    assert calls == []
    assert result.succeeded == result.failed == result.dropped == []


def test_drain_runs_oldest_first_and_removes_successes(tmp_path, queue) -> None:
    for d in ("2024-06-01", "2024-06-02", "2024-06-03"):
        queue.enqueue(_post(d))
    seen = []
    result = queue.drain(lambda op: seen.append(op.body["date"]))
    assert seen == ["2024-06-01", "2024-06-02", "2024-06-03"]
    assert len(result.succeeded) == 3
    assert len(queue) == 0
    assert not (tmp_path / f"{QUEUE_KEY}.json").exists()


def test_failure_keeps_operation_and_counts_retry(queue) -> None:
    queue.enqueue(_post("2024-06-01"))
    queue.enqueue(_post("2024-06-02"))

    def executor(op):
        if op.body["date"] == "2024-06-01":
            raise TransportError("sin red")

    result = queue.drain(executor)
    assert [o.body["date"] for o in result.succeeded] == ["2024-06-02"]
    remaining = queue.peek_all()
    assert [(o.body["date"], o.retry_count) for o in remaining] == [("2024-06-01", 1)]


def test_dropped_after_exceeding_max_retries(queue, caplog) -> None:
    queue.enqueue(_post("2024-06-01"))

    def always_fail(op):
        raise ApiError(500, "caído")

    for attempt in range(1, 6):
        result = queue.drain(always_fail)
        assert result.dropped == []
        assert queue.peek_all()[0].retry_count == attempt

    with caplog.at_level("WARNING", logger="wellwork.sync"):
        result = queue.drain(always_fail)
    assert len(result.dropped) == 1
    assert result.dropped[0].retry_count == 6
    assert len(queue) == 0
    assert any("descarta" in r.message for r in caplog.records)


def test_discard_by_predicate(queue) -> None:
    queue.enqueue(_post("2024-06-01"))
    queue.enqueue(PendingOperation(method="DELETE", path="/api/notes/abc"))
    assert queue.discard(lambda op: op.method == "POST") == 1
    assert [o.describe() for o in queue.peek_all()] == ["DELETE /api/notes/abc"]


def test_invalid_entries_are_skipped(tmp_path) -> None:
    storage = LocalStorage(tmp_path)
    storage.set_item(QUEUE_KEY, [{"method": "PATCH", "path": "/x"}, {"method": "DELETE", "path": "/api/notes/1"}])
    queue = PendingOperationQueue(storage)
    assert [o.path for o in queue.peek_all()] == ["/api/notes/1"]


def test_delete_given_up_after_six_failed_replays(queue) -> None:
    queue.enqueue(PendingOperation(method="DELETE", path="/api/notes/abc"))
    attempts = []

    def failing(op):
        attempts.append(op.retry_count)
        raise TransportError("sin red")

    for _ in range(6):
        queue.drain(failing)
    assert len(queue) == 0

    queue.drain(failing)
    assert attempts == [0, 1, 2, 3, 4, 5]
