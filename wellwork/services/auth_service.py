"""
Lógica de autenticación: registro y login con usuario/contraseña.
"""
from typing import Any, Dict, Optional

from argon2 import PasswordHasher
from argon2.low_level import Type

from wellwork.core.config import settings
from wellwork.repositories import user_repo as repo
from wellwork.services.token_service import create_access_token


class UsernameTakenError(Exception):
    pass


class InvalidCredentialsError(Exception):
    pass


ph = PasswordHasher(time_cost=2, memory_cost=51200, parallelism=2, hash_len=32, salt_len=16, type=Type.ID)


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return ph.verify(password_hash, password)
    except Exception:
        return False


def _clean_username(username: Optional[str]) -> str:
    return (username or "").strip() if isinstance(username, str) else ""


def register_user(username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    """
    Registra un usuario local.

    - `username` se recorta; ambos campos son obligatorios.
    - La contraseña debe tener al menos `password_min_length` caracteres.
    """
    name = _clean_username(username)
    if not name or not password:
        raise ValueError("Usuario y contraseña son obligatorios.")
    if len(password) < settings.password_min_length:
        raise ValueError(f"La contraseña debe tener al menos {settings.password_min_length} caracteres.")
    if repo.find_user_by_username(name):
        raise UsernameTakenError("El nombre de usuario ya está en uso.")
    try:
        repo.insert_user(name, hash_password(password))
    except ValueError:
        # Carrera entre dos registros simultáneos del mismo nombre
        raise UsernameTakenError("El nombre de usuario ya está en uso.")
    return {"message": "Registro exitoso. Ya puedes iniciar sesión."}


def login(username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    """Valida credenciales y emite el access token.

    Mismo error para usuario inexistente y contraseña incorrecta.
    """
    name = _clean_username(username)
    if not name or not password:
        raise ValueError("Usuario y contraseña son obligatorios.")
    u = repo.find_user_by_username(name)
    if not u or not verify_password(password, u.get("passwordHash") or ""):
        raise InvalidCredentialsError("Credenciales inválidas.")
    token = create_access_token(user=u)
    return {
        "message": "Inicio de sesión exitoso.",
        "token": token,
        "user": {"id": u["id"], "username": u["username"]},
    }
