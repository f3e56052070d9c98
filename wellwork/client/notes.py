"""Superficie de edición de notas del cliente (online con caída a offline).

Escrituras:
- Online: se llama al servidor y su respuesta reescribe la caché.
- Sin respuesta (transporte) o 5xx: cambio optimista en la caché + operación en cola.
- 4xx: es un rechazo real; se propaga y no se toca la caché.
- En modo degradado ni se intenta la red.

Lecturas: red si está disponible (escribiendo en la caché); si no, la caché.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from wellwork.client.connectivity import ConnectivityMonitor
from wellwork.client.http import ApiClient, ApiError, ClientError, TransportError
from wellwork.client.queue import PendingOperation, PendingOperationQueue
from wellwork.client.reconciler import SyncReconciler
from wellwork.client.storage import NotesCache, SessionCache
from wellwork.core.time import now_iso, parse_day

NOTES_PATH = "/api/notes"
TEMP_PREFIX = "temp_"

_log = logging.getLogger("wellwork.notes")


class NotAuthenticatedError(Exception):
    pass


def is_temporary_id(note_id: Any) -> bool:
    return str(note_id).startswith(TEMP_PREFIX)


def new_temporary_id() -> str:
    return f"{TEMP_PREFIX}{uuid.uuid4().hex[:12]}"


class NoteEditor:
    def __init__(
        self,
        api: ApiClient,
        cache: NotesCache,
        queue: PendingOperationQueue,
        session: SessionCache,
        reconciler: Optional[SyncReconciler] = None,
        monitor: Optional[ConnectivityMonitor] = None,
    ) -> None:
        self.api = api
        self.cache = cache
        self.queue = queue
        self.session = session
        self.reconciler = reconciler
        self.monitor = monitor

    @property
    def offline(self) -> bool:
        return self.reconciler is not None and self.reconciler.is_degraded

    def _user_id(self) -> str:
        user_id = self.session.user_id()
        if not user_id:
            raise NotAuthenticatedError("Debes iniciar sesión.")
        return user_id

    def _went_offline(self, e: TransportError) -> None:
        _log.info("Sin conexión con el backend: %s", e)
        if self.monitor is not None:
            self.monitor.report_transport_failure()

    # --- Lectura ---
    def load_notes(self) -> List[Dict[str, Any]]:
        user_id = self._user_id()
        if not self.offline:
            try:
                notes = self.api.list_notes()
            except TransportError as e:
                self._went_offline(e)
            except ClientError as e:
                _log.warning("No se pudieron cargar notas del servidor, se usa la caché: %s", e)
            else:
                self.cache.save(user_id, notes)
                return notes
        return self.cache.load(user_id)

    def note_for_date(self, date: str) -> Optional[Dict[str, Any]]:
        return next((n for n in self.load_notes() if n.get("date") == date), None)

    # --- Escritura ---
    def save(self, date: str, content: str) -> List[Dict[str, Any]]:
        """Crea o actualiza la nota del día `date`. Devuelve la lista resultante."""
        user_id = self._user_id()
        if parse_day(date) is None:
            raise ValueError("Fecha inválida (YYYY-MM-DD).")
        text = (content or "").strip()
        if not text:
            raise ValueError("El contenido es obligatorio.")

        if not self.offline:
            try:
                notes = self.api.upsert_note(date, text)
            except TransportError as e:
                self._went_offline(e)
            except ApiError as e:
                if e.is_client_error:
                    raise
                _log.warning("Error del servidor al guardar, queda en cola: %s", e)
            else:
                self.cache.save(user_id, notes)
                return notes
        return self._save_locally(user_id, date, text)

    def _save_locally(self, user_id: str, date: str, content: str) -> List[Dict[str, Any]]:
        notes = self.cache.load(user_id)
        stamp = now_iso()
        for i, note in enumerate(notes):
            if note.get("date") == date:
                notes[i] = {**note, "content": content, "updatedAt": stamp}
                break
        else:
            notes.append({
                "id": new_temporary_id(),
                "userId": user_id,
                "date": date,
                "content": content,
                "createdAt": stamp,
                "updatedAt": stamp,
            })
        self.cache.save(user_id, notes)
        self.queue.enqueue(PendingOperation(method="POST", path=NOTES_PATH, body={"date": date, "content": content}))
        return notes

    def delete(self, note_id: str) -> List[Dict[str, Any]]:
        """Elimina la nota `note_id`. Devuelve la lista resultante."""
        user_id = self._user_id()
        if not self.offline and not is_temporary_id(note_id):
            try:
                notes = self.api.delete_note(note_id)
            except TransportError as e:
                self._went_offline(e)
            except ApiError as e:
                if e.is_client_error:
                    raise
                _log.warning("Error del servidor al eliminar, queda en cola: %s", e)
            else:
                self.cache.save(user_id, notes)
                return notes
        return self._delete_locally(user_id, note_id)

    def _delete_locally(self, user_id: str, note_id: str) -> List[Dict[str, Any]]:
        notes = self.cache.load(user_id)
        target = next((n for n in notes if str(n.get("id")) == str(note_id)), None)
        if target is None:
            raise LookupError("Nota no encontrada.")
        remaining = [n for n in notes if n is not target]
        self.cache.save(user_id, remaining)

        if is_temporary_id(note_id):
            # Nunca llegó al servidor: se retira su alta pendiente en vez de encolar un DELETE
            date = target.get("date")
            self.queue.discard(
                lambda op: op.method == "POST" and op.path == NOTES_PATH and (op.body or {}).get("date") == date
            )
        else:
            self.queue.enqueue(PendingOperation(method="DELETE", path=f"{NOTES_PATH}/{note_id}"))
        return remaining
