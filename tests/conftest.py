from __future__ import annotations

from typing import Any, Callable, Optional

import pytest
import requests
from fastapi.testclient import TestClient

from wellwork.core import rate_limit
from wellwork.core.config import settings


class ManualClock:
    """Reloj monotónico controlado por el test."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FlakySession:
    """Transporte estilo `requests.Session` sobre el TestClient que puede "caerse".

    - `online = False`: toda petición lanza `requests.ConnectionError`.
    - `fail_status`: responde ese status sin llegar a la app.
    - `before_request(method, url)`: hook para simular eventos a mitad de vuelo.
    """

    def __init__(self, client: TestClient) -> None:
        self.client = client
        self.online = True
        self.fail_status: Optional[int] = None
        self.before_request: Optional[Callable[[str, str], None]] = None
        self.calls: list[tuple[str, str]] = []

    def request(self, method: str, url: str, json: Any = None, headers: Any = None, timeout: Any = None):
        self.calls.append((method, url))
        if self.before_request is not None:
            self.before_request(method, url)
        if not self.online:
            raise requests.ConnectionError("backend caído")
        if self.fail_status is not None:
            resp = requests.Response()
            resp.status_code = self.fail_status
            resp._content = b'{"message": "falla simulada"}'
            return resp
        return self.client.request(method, url, json=json, headers=headers)

    def paths(self, method: Optional[str] = None) -> list[str]:
        out = []
        for m, url in self.calls:
            if method is None or m == method:
                out.append(url.replace("http://testserver", ""))
        return out


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "client_storage_dir", str(tmp_path / "client"))
    monkeypatch.setattr(settings, "wellness_notifications_enabled", False)
    rate_limit.reset()
    yield settings
    rate_limit.reset()


@pytest.fixture
def api():
    from wellwork.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def flaky(api) -> FlakySession:
    return FlakySession(api)


@pytest.fixture
def signup(api) -> Callable[..., dict]:
    """Registra e inicia sesión; devuelve la respuesta de /login."""

    def _signup(username: str = "ana", password: str = "secreto1") -> dict:
        r = api.post("/register", json={"username": username, "password": password})
        assert r.status_code == 201, r.text
        r = api.post("/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return r.json()

    return _signup


@pytest.fixture
def headers(signup) -> dict:
    """Cabecera Authorization de un usuario recién registrado (ana)."""
    return {"Authorization": f"Bearer {signup()['token']}"}


@pytest.fixture
def make_client(flaky, clock, tmp_path):
    """Fábrica de `WellWorkClient` sobre el TestClient; comparte el almacenamiento local."""
    from datetime import date

    from wellwork.client.app import WellWorkClient
    from wellwork.client.scheduler import Scheduler

    created = []

    def _make(**kwargs):
        kwargs.setdefault("http", flaky)
        kwargs.setdefault("scheduler", Scheduler(clock))
        kwargs.setdefault("today", lambda: date(2024, 5, 31))
        client = WellWorkClient("http://testserver", tmp_path / "client", **kwargs)
        created.append(client)
        return client

    yield _make
    for client in created:
        client.close()


@pytest.fixture
def client(make_client):
    c = make_client()
    c.register("ana", "secreto1")
    c.login("ana", "secreto1")
    return c
