"""Recordatorios de tareas a partir de las notas del calendario.

Una nota cuenta como tarea si tiene contenido y su fecha cae hoy, mañana o
pasado mañana. Cada nota se recuerda como máximo una vez por día: la clave
`"{note_id}-{YYYY-MM-DD}"` se guarda en `shown`.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Optional, Set

from wellwork.core.time import day_key, parse_day

LOOKAHEAD_DAYS = 2
PREVIEW_CHARS = 50


def _preview(content: str) -> str:
    text = content.strip()
    if len(text) > PREVIEW_CHARS:
        return text[:PREVIEW_CHARS] + "..."
    return text


def reminder_key(note_id: str, today: date) -> str:
    return f"{note_id}-{day_key(today)}"


def upcoming_notes(notes: Iterable[Dict[str, Any]], today: date, days: int = LOOKAHEAD_DAYS) -> list[Dict[str, Any]]:
    """Notas con contenido entre hoy y hoy+`days`, ordenadas por fecha."""
    out = []
    for n in notes or []:
        d = parse_day(n.get("date"))
        if d is None or not (n.get("content") or "").strip():
            continue
        if 0 <= (d - today).days <= days:
            out.append(n)
    return sorted(out, key=lambda n: n["date"])


def check_upcoming_tasks(
    notes: Iterable[Dict[str, Any]],
    today: Optional[date] = None,
    shown: Optional[Set[str]] = None,
) -> Optional[Dict[str, Any]]:
    """Devuelve el recordatorio más urgente aún no mostrado hoy (o None).

    Efecto: agrega la clave del recordatorio devuelto a `shown`.
    """
    today = today or date.today()
    shown = shown if shown is not None else set()
    pending = [n for n in upcoming_notes(notes, today) if reminder_key(str(n.get("id")), today) not in shown]
    if not pending:
        return None

    urgent = pending[0]
    days_until = (parse_day(urgent["date"]) - today).days
    preview = _preview(urgent["content"])
    if days_until == 0:
        emoji, when = "⚠️", "HOY"
    elif days_until == 1:
        emoji, when = "⏰", "MAÑANA"
    else:
        emoji, when = "📅", f"en {days_until} días"
    message = f'{emoji} 🔔 Tarea para {when}: "{preview}"'

    shown.add(reminder_key(str(urgent.get("id")), today))
    return {"message": message, "note_id": urgent.get("id"), "date": urgent["date"]}
