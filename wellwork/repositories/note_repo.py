"""Repo de notas (`notes.json`).

Invariante: a lo sumo una nota por (userId, date). Cada mutación devuelve
todas las notas del usuario, que es lo que expone la API.
"""
from typing import Any, Dict, List
from uuid import uuid4

from wellwork.core.time import now_iso
from wellwork.infrastructure.db.json_store import notes_store


def _of_user(notes: List[Dict[str, Any]], user_id: str) -> List[Dict[str, Any]]:
    return [dict(n) for n in notes if n.get("userId") == user_id]


def list_notes(user_id: str) -> List[Dict[str, Any]]:
    return _of_user(notes_store().read(), user_id)


def upsert_note(user_id: str, date: str, content: str) -> List[Dict[str, Any]]:
    """Crea o actualiza la nota del día `date` para el usuario."""
    with notes_store().edit() as notes:
        now = now_iso()
        existing = next((n for n in notes if n.get("userId") == user_id and n.get("date") == date), None)
        if existing is not None:
            existing["content"] = content
            existing["updatedAt"] = now
        else:
            notes.append({
                "id": str(uuid4()),
                "userId": user_id,
                "date": date,
                "content": content,
                "createdAt": now,
                "updatedAt": now,
            })
        return _of_user(notes, user_id)


def update_note(user_id: str, note_id: str, content: str) -> List[Dict[str, Any]]:
    """Actualiza contenido por id. LookupError si no existe para ese usuario."""
    with notes_store().edit() as notes:
        note = next((n for n in notes if n.get("id") == note_id and n.get("userId") == user_id), None)
        if note is None:
            raise LookupError(note_id)
        note["content"] = content
        note["updatedAt"] = now_iso()
        return _of_user(notes, user_id)


def delete_note(user_id: str, note_id: str) -> List[Dict[str, Any]]:
    """Elimina por id. LookupError si no existe para ese usuario."""
    with notes_store().edit() as notes:
        kept = [n for n in notes if not (n.get("id") == note_id and n.get("userId") == user_id)]
        if len(kept) == len(notes):
            raise LookupError(note_id)
        notes[:] = kept
        return _of_user(notes, user_id)
