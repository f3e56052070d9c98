"""Cliente HTTP mínimo para la API de WellWork (requests).

Clasifica los fallos en dos familias:
- `TransportError`: no hubo respuesta (servidor caído, timeout, DNS). Es la
  señal de conectividad que activa el modo offline y la cola.
- `ApiError`: el servidor respondió con un status no exitoso. Los 4xx son
  rechazos de validación/negocio y se muestran al usuario tal cual.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import requests

from wellwork.core.config import settings

if TYPE_CHECKING:
    from wellwork.client.queue import PendingOperation

_log = logging.getLogger("wellwork.http")


class ClientError(Exception):
    pass


class TransportError(ClientError):
    pass


class ApiError(ClientError):
    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(f"{status_code}: {message}" if message else str(status_code))
        self.status_code = status_code
        self.message = message

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


class CancelledError(ClientError):
    """La petición se descartó porque su `CancelToken` fue cancelado."""


class CancelToken:
    """Cancelación explícita de una petición en curso (distinta de un fallo)."""

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise CancelledError("cancelado")


def _message_from(resp: Any) -> str:
    try:
        data = resp.json()
    except ValueError:
        return ""
    if isinstance(data, dict):
        return str(data.get("message") or data.get("detail") or "")
    return ""


class ApiClient:
    """Llamadas a la API REST. `http` es cualquier objeto con `.request()` estilo requests."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        http: Any = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_url_normalized).rstrip("/")
        self.token_provider = token_provider or (lambda: None)
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout or settings.request_timeout_seconds

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        auth: bool = True,
        timeout: Optional[float] = None,
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        if auth:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        try:
            resp = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers=headers,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {path}: {e}") from e
        if not 200 <= resp.status_code < 300:
            raise ApiError(resp.status_code, _message_from(resp))
        try:
            return resp.json()
        except ValueError:
            raise ApiError(resp.status_code, "respuesta no es JSON")

    # --- Endpoints ---
    def health(self, *, cancel: Optional[CancelToken] = None, timeout: Optional[float] = None) -> Dict[str, Any]:
        """GET /health. Si `cancel` se activa durante la llamada, el resultado se descarta."""
        if cancel:
            cancel.raise_if_cancelled()
        data = self._request("GET", "/health", auth=False, timeout=timeout or settings.health_check_timeout_seconds)
        if cancel:
            cancel.raise_if_cancelled()
        return data

    def register(self, username: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/register", json={"username": username, "password": password}, auth=False)

    def login(self, username: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/login", json={"username": username, "password": password}, auth=False)

    def list_notes(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/notes")

    def upsert_note(self, date: str, content: str) -> List[Dict[str, Any]]:
        return self._request("POST", "/api/notes", json={"date": date, "content": content})

    def update_note(self, note_id: str, content: str) -> List[Dict[str, Any]]:
        return self._request("PUT", f"/api/notes/{note_id}", json={"content": content})

    def delete_note(self, note_id: str) -> List[Dict[str, Any]]:
        return self._request("DELETE", f"/api/notes/{note_id}")

    def replay(self, operation: "PendingOperation") -> Any:
        """Ejecuta una operación de la cola contra el servidor.

        Un DELETE respondido con 404 cuenta como éxito: la nota ya no existe.
        """
        try:
            return self._request(operation.method, operation.path, json=operation.body)
        except ApiError as e:
            if operation.method == "DELETE" and e.status_code == 404:
                _log.info("DELETE idempotente (ya no existía): %s", operation.path)
                return None
            raise
