from __future__ import annotations

import pytest

from wellwork.client.connectivity import CHECKING, OFFLINE, ONLINE, ConnectivityMonitor
from wellwork.client.http import ApiClient
from wellwork.client.scheduler import Scheduler


@pytest.fixture
def scheduler(clock) -> Scheduler:
    return Scheduler(clock)


@pytest.fixture
def monitor(flaky, scheduler) -> ConnectivityMonitor:
    api = ApiClient("http://testserver", http=flaky)
    return ConnectivityMonitor(api, scheduler, interval=5)


def test_initial_state_is_checking(monitor) -> None:
    assert monitor.state == CHECKING
    assert not monitor.is_online


def test_start_checks_immediately_then_on_interval(monitor, flaky, scheduler, clock) -> None:
    monitor.start()
    assert monitor.state == ONLINE
    assert flaky.paths() == ["/health"]

    clock.advance(4.9)
    scheduler.run_pending()
    assert len(flaky.calls) == 1
    clock.advance(0.1)
    scheduler.run_pending()
    assert len(flaky.calls) == 2


def test_transitions_are_edge_triggered(monitor, flaky) -> None:
    seen = []
    monitor.subscribe(lambda prev, cur: seen.append((prev, cur)))

    monitor.check_now()
    monitor.check_now()
    flaky.online = False
    monitor.check_now()
    monitor.check_now()
    flaky.online = True
    monitor.check_now()

    assert seen == [(CHECKING, ONLINE), (ONLINE, OFFLINE), (OFFLINE, ONLINE)]


def test_server_error_counts_as_offline(monitor, flaky) -> None:
    flaky.fail_status = 503
    assert monitor.check_now() == OFFLINE


def test_unsubscribe(monitor, flaky) -> None:
    seen = []
    unsubscribe = monitor.subscribe(lambda prev, cur: seen.append(cur))
    unsubscribe()
    monitor.check_now()
    assert seen == []


def test_listener_error_does_not_break_others(monitor) -> None:
    seen = []

    def broken(prev, cur):
        raise RuntimeError("boom")

    monitor.subscribe(broken)
    monitor.subscribe(lambda prev, cur: seen.append(cur))
    monitor.check_now()
    assert seen == [ONLINE]


def test_close_mid_flight_discards_result(monitor, flaky, scheduler) -> None:
    seen = []
    monitor.subscribe(lambda prev, cur: seen.append(cur))
    flaky.before_request = lambda method, url: monitor.close()

    monitor.start()

    assert monitor.state == CHECKING
    assert seen == []
    assert scheduler.pending() == 0


def test_cancelled_offline_result_is_not_a_signal(monitor, flaky) -> None:
    flaky.online = False
    flaky.before_request = lambda method, url: monitor.close()
    assert monitor.check_now() == CHECKING


def test_newer_check_supersedes_inflight(monitor, flaky) -> None:
    seen = []
    monitor.subscribe(lambda prev, cur: seen.append(cur))
    nested = []

    def overlap(method, url):
        if not nested:
            nested.append(True)
            # un nuevo ciclo arranca mientras el primero sigue en vuelo
            monitor.check_now()

    flaky.before_request = overlap
    monitor.check_now()

    assert len(flaky.calls) == 2
    assert seen == [ONLINE]


def test_report_transport_failure_goes_offline(monitor) -> None:
    monitor.check_now()
    monitor.report_transport_failure()
    assert monitor.state == OFFLINE
