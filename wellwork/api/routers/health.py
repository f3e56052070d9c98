"""Health (sin auth): usado por el monitor de conectividad del cliente."""
from fastapi import APIRouter, status

from wellwork.api.schemas.health import HealthOut
from wellwork.core.time import now_iso


router = APIRouter(tags=["Health"])  # no prefix to keep paths stable


@router.get("/health", status_code=status.HTTP_200_OK, response_model=HealthOut, summary="Salud básica")
def health() -> HealthOut:
    return HealthOut(status="ok", time=now_iso())
