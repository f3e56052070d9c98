"""
Esquemas Pydantic para registro y login.

Los campos son opcionales a propósito: la validación (obligatorios, longitud
mínima) vive en `auth_service` y responde 400 con un mensaje claro.
"""
from typing import Optional
from pydantic import BaseModel


class CredentialsPayload(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class MessageOut(BaseModel):
    message: str


class UserOut(BaseModel):
    id: str
    username: str


class LoginOut(BaseModel):
    message: str
    token: str
    user: UserOut
