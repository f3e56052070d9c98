"""Almacenamiento local durable del cliente (equivalente a `localStorage`).

- Un archivo JSON por clave dentro de `directory`.
- Escrituras atómicas: un corte a mitad de escritura deja el valor anterior.
- Las lecturas nunca fallan: valor ausente o corrupto -> `default`.

Claves usadas por el cliente:
- `wellwork_notes_{userId}`: caché de notas por usuario.
- `wellwork_session`: sesión (token + usuario).
- `wellwork_sync_queue`: cola de operaciones pendientes.
"""
from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

STORAGE_PREFIX = "wellwork_"

_log = logging.getLogger("wellwork.storage")
_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class LocalStorage:
    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{_SAFE_KEY.sub('_', key)}.json"

    def get_item(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return default
        except UnicodeDecodeError as e:
            _log.error("Valor corrupto en %s, se ignora: %s", key, e)
            return default
        except OSError as e:
            _log.error("No se pudo leer %s: %s", key, e)
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            _log.error("Valor corrupto en %s, se ignora: %s", key, e)
            return default

    def set_item(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(self.directory))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(value, fh, ensure_ascii=False)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


def user_key(user_id: str, key: str) -> str:
    return f"{STORAGE_PREFIX}{key}_{user_id}"


class NotesCache:
    """Última lista de notas conocida por usuario (write-through, sin expiración)."""

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def save(self, user_id: str, notes: List[Dict[str, Any]]) -> bool:
        try:
            self.storage.set_item(user_key(user_id, "notes"), list(notes))
            return True
        except (OSError, TypeError, ValueError) as e:
            _log.error("Error guardando notas en caché: %s", e)
            return False

    def load(self, user_id: str) -> List[Dict[str, Any]]:
        """Nunca lanza: entrada corrupta o ausente -> []."""
        data = self.storage.get_item(user_key(user_id, "notes"), [])
        if not isinstance(data, list):
            return []
        return [n for n in data if isinstance(n, dict)]

    def clear(self, user_id: str) -> None:
        try:
            self.storage.remove_item(user_key(user_id, "notes"))
        except OSError as e:
            _log.error("Error limpiando caché de notas: %s", e)


class SessionCache:
    """Sesión persistida: `{"token": str, "user": {"id", "username"}}`."""

    KEY = f"{STORAGE_PREFIX}session"

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def save(self, session: Dict[str, Any]) -> bool:
        try:
            self.storage.set_item(self.KEY, session)
            return True
        except (OSError, TypeError, ValueError) as e:
            _log.error("Error guardando sesión: %s", e)
            return False

    def load(self) -> Optional[Dict[str, Any]]:
        data = self.storage.get_item(self.KEY)
        if not isinstance(data, dict) or not data.get("token") or not isinstance(data.get("user"), dict):
            return None
        return data

    def clear(self) -> None:
        try:
            self.storage.remove_item(self.KEY)
        except OSError as e:
            _log.error("Error limpiando sesión: %s", e)

    def token(self) -> Optional[str]:
        s = self.load()
        return s["token"] if s else None

    def user_id(self) -> Optional[str]:
        s = self.load()
        return str(s["user"].get("id")) if s and s["user"].get("id") else None
