"""Límite de intentos en memoria, por (identificador, ruta).

Lo usa `/login` con la IP del cliente. Ventana deslizante: sólo cuentan los
intentos de los últimos `window_seconds`. No se comparte entre procesos.
"""
from time import time
from typing import Dict, Tuple

BUCKET: Dict[Tuple[str, str], list[float]] = {}


def allow(key: Tuple[str, str], limit: int = 5, window_seconds: int = 60) -> bool:
    """True si el intento entra en la ventana (y lo registra); False si hay que responder 429."""
    now = time()
    attempts = [t for t in BUCKET.get(key, []) if now - t < window_seconds]
    if len(attempts) >= limit:
        BUCKET[key] = attempts
        return False
    attempts.append(now)
    BUCKET[key] = attempts
    return True


def reset() -> None:
    BUCKET.clear()
