"""
Utilidades de fecha/hora compartidas por servidor y cliente.

- Timestamps en ISO-8601 UTC con milisegundos y sufijo `Z` (mismo formato que `Date.toISOString()`).
- Fechas de calendario como `YYYY-MM-DD` (un día local, sin zona horaria).
"""
from __future__ import annotations

from datetime import date, datetime, timezone

DATE_FORMAT = "%Y-%m-%d"


def now_iso() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_day(value: str | None) -> date | None:
    """Convierte `YYYY-MM-DD` a `date`; None si el valor no es un día válido."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def day_key(d: date) -> str:
    return d.strftime(DATE_FORMAT)
