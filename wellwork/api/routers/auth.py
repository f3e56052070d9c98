"""Rutas de autenticación: registro y login."""
import logging
from fastapi import APIRouter, HTTPException, status, Request

from wellwork.api.schemas.auth import CredentialsPayload, MessageOut, LoginOut
from wellwork.services import auth_service as service
from wellwork.core import rate_limit
from wellwork.core.config import settings

router = APIRouter(tags=["Auth"])
_log = logging.getLogger("wellwork.auth")


@router.post(
    "/register",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar usuario",
    description="Crea una cuenta local (username + password).",
)
def register(payload: CredentialsPayload) -> MessageOut:
    try:
        res = service.register_user(payload.username, payload.password)
    except service.UsernameTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    _log.info("Usuario registrado username=%s", (payload.username or "").strip())
    return MessageOut(**res)


@router.post(
    "/login",
    response_model=LoginOut,
    summary="Login",
    description="Valida credenciales y devuelve un access token (Bearer) y el usuario.",
)
def login(payload: CredentialsPayload, request: Request) -> LoginOut:
    # Rate limit por IP
    ip = request.client.host if request.client else ""
    if not rate_limit.allow((ip, "/login"), limit=settings.login_rate_per_min):
        raise HTTPException(status_code=429, detail="Demasiados intentos, espera un momento.")
    try:
        res = service.login(payload.username, payload.password)
    except service.InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LoginOut(**res)
