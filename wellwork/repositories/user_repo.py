"""Repo de usuarios (`user.json`)."""
from typing import Any, Dict, Optional
from uuid import uuid4

from wellwork.core.time import now_iso
from wellwork.infrastructure.db.json_store import users_store


def find_user_by_username(username: str) -> Optional[Dict[str, Any]]:
    """Busca usuario por nombre exacto (ya recortado)."""
    for u in users_store().read():
        if u.get("username") == username:
            return u
    return None


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    for u in users_store().read():
        if u.get("id") == user_id:
            return u
    return None


def insert_user(username: str, password_hash: str) -> Dict[str, Any]:
    """Inserta usuario y lo devuelve. ValueError si el nombre ya existe."""
    with users_store().edit() as users:
        if any(u.get("username") == username for u in users):
            raise ValueError("username ya registrado")
        doc = {
            "id": str(uuid4()),
            "username": username,
            "passwordHash": password_hash,
            "createdAt": now_iso(),
        }
        users.append(doc)
    return doc
