"""Servicio utilitario de calendario mensual.

`month_grid` arma las semanas del mes (domingo primero) marcando los días con nota.
"""
from __future__ import annotations

import calendar
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from wellwork.core.time import day_key

MONTH_NAMES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]
WEEK_DAYS = ["Dom", "Lun", "Mar", "Mié", "Jue", "Vie", "Sáb"]


def _days_with_notes(notes: Iterable[Dict[str, Any]]) -> set[str]:
    return {n.get("date") for n in notes or [] if (n.get("content") or "").strip()}


def month_grid(
    year: int,
    month: int,
    notes: Iterable[Dict[str, Any]] = (),
    selected: Optional[str] = None,
    today: Optional[date] = None,
) -> List[List[Optional[Dict[str, Any]]]]:
    """Semanas del mes; las celdas fuera del mes son None.

    Celda: {day, date, has_note, is_today, is_selected}
    """
    today = today or date.today()
    marked = _days_with_notes(notes)
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    weeks: List[List[Optional[Dict[str, Any]]]] = []
    for week in cal.monthdatescalendar(year, month):
        row: List[Optional[Dict[str, Any]]] = []
        for d in week:
            if d.month != month:
                row.append(None)
                continue
            key = day_key(d)
            row.append({
                "day": d.day,
                "date": key,
                "has_note": key in marked,
                "is_today": d == today,
                "is_selected": key == selected,
            })
        weeks.append(row)
    return weeks


def render_month(year: int, month: int, notes: Iterable[Dict[str, Any]] = (), today: Optional[date] = None) -> str:
    """Versión texto del mes (para la CLI). `*` marca días con nota."""
    lines = [f"{MONTH_NAMES[month - 1].capitalize()} {year}", " ".join(f"{w:>4}" for w in WEEK_DAYS)]
    for week in month_grid(year, month, notes, today=today):
        cells = []
        for c in week:
            if c is None:
                cells.append("    ")
            else:
                mark = "*" if c["has_note"] else ("." if c["is_today"] else " ")
                cells.append(f"{c['day']:>3}{mark}")
        lines.append(" ".join(cells))
    return "\n".join(lines)
