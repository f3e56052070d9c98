"""
Service layer for notes: validación sobre el repositorio.
"""
from typing import Any, Dict, List, Optional

from wellwork.core.time import parse_day
from wellwork.repositories import note_repo


def _clean_content(content: Optional[str]) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValueError("El contenido es obligatorio.")
    return content.strip()


def list_notes(user_id: str) -> List[Dict[str, Any]]:
    return note_repo.list_notes(user_id)


def save_note(user_id: str, date: Optional[str], content: Optional[str]) -> List[Dict[str, Any]]:
    """Upsert por (usuario, fecha)."""
    if not date or not content or not str(content).strip():
        raise ValueError("La fecha y el contenido son obligatorios.")
    if parse_day(date) is None:
        raise ValueError("La fecha debe tener formato YYYY-MM-DD.")
    return note_repo.upsert_note(user_id, date.strip(), _clean_content(content))


def update_note(user_id: str, note_id: str, content: Optional[str]) -> List[Dict[str, Any]]:
    return note_repo.update_note(user_id, note_id, _clean_content(content))


def delete_note(user_id: str, note_id: str) -> List[Dict[str, Any]]:
    return note_repo.delete_note(user_id, note_id)
