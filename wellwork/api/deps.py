"""
Dependencias reutilizables para routers (FastAPI Depends).

- Autenticación: extrae y valida el Bearer token, devuelve el usuario actual.
- Mantener esta capa delgada: sin lógica de negocio.
"""
from typing import Optional, Dict, Any
from fastapi import HTTPException, Header
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from wellwork.services.token_service import verify_access_token
from wellwork.repositories import user_repo as repo


def get_current_user(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
    """Usuario del token.

    - Sin token: 401.
    - Token inválido o expirado: 403.
    - Usuario eliminado del almacén: 401.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Se requiere token de acceso.")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Se requiere token de acceso.")
    try:
        payload = verify_access_token(token)
    except Exception:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Token inválido o expirado.")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Token inválido o expirado.")
    u = repo.get_user_by_id(user_id)
    if not u:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Usuario no encontrado.")
    return {"id": u["id"], "username": u["username"]}
