"""Persistencia en archivos JSON (un arreglo por archivo).

Reemplaza a una base de datos para despliegues pequeños:
- Si el archivo no existe se crea con `[]`.
- Si está vacío se interpreta como `[]`.
- Si está corrupto se registra el error y se reinicia a `[]` (nunca tumba la app).
- Las escrituras son atómicas (archivo temporal + `os.replace`).
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

from wellwork.core.config import settings

_log = logging.getLogger("wellwork.store")

# Un lock por archivo: los endpoints sync de FastAPI corren en un threadpool
_LOCKS: Dict[str, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(key, threading.RLock())


class JsonStore:
    """Arreglo JSON persistido en `path`."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def _reset(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("[]", encoding="utf-8")

    def _read_unlocked(self) -> List[Dict[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._reset()
            return []
        except UnicodeDecodeError as e:
            _log.error("Archivo corrupto %s, se reinicia: %s", self.path.name, e)
            self._reset()
            return []
        if not raw or not raw.strip():
            return []
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            _log.error("Archivo corrupto %s, se reinicia: %s", self.path.name, e)
            self._reset()
            return []
        return parsed if isinstance(parsed, list) else []

    def _write_unlocked(self, items: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def read(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._read_unlocked()

    def write(self, items: List[Dict[str, Any]]) -> None:
        with self._lock:
            self._write_unlocked(items)

    @contextmanager
    def edit(self) -> Iterator[List[Dict[str, Any]]]:
        """Read-modify-write bajo lock.

        La lista se guarda sólo si el bloque termina sin excepción.
        """
        with self._lock:
            items = self._read_unlocked()
            yield items
            self._write_unlocked(items)


def users_store() -> JsonStore:
    return JsonStore(settings.users_path)


def notes_store() -> JsonStore:
    return JsonStore(settings.notes_path)
