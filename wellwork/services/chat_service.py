"""Asistente guionado de WellWork: detección simple por palabras clave.

No usa LLM. Cada categoría tiene respuestas predefinidas y se elige una al
azar (con `random.Random` inyectable para tests). La primera categoría que
coincide gana, así que el orden de `_RULES` importa.
"""
from __future__ import annotations

import random
import re
import unicodedata
from datetime import date
from typing import Any, Dict, Iterable, Optional

from wellwork.services.reminder_service import check_upcoming_tasks, upcoming_notes

WELCOME = (
    "¡Hola! Soy tu asistente de WellWork. Puedo ayudarte con tu calendario, darte consejos "
    "de bienestar o responder preguntas. Escribe 'ayuda' para ver lo que puedo hacer."
)

RESPONSES: Dict[str, list[str]] = {
    "greeting": [
        "¡Hola! Soy tu asistente de WellWork. ¿En qué te ayudo hoy?",
        "¡Hola! Estoy aquí para ayudarte con tu calendario y darte consejos de bienestar. ¿Qué quieres saber?",
        "¡Bienvenido! Puedo ayudarte a organizar tu calendario, darte consejos o resolver dudas. ¿Qué necesitas?",
    ],
    "help": [
        "Puedo ayudarte con:\n• Tu calendario y tus notas\n• Consejos y recordatorios de bienestar\n"
        "• Ideas de productividad\n• Gestión del tiempo\n\n¿Con qué quieres empezar?",
    ],
    "calendar": [
        "Para agregar una nota, elige un día del calendario, escribe tu nota y pulsa 'Guardar nota'.",
        "Los días con nota aparecen marcados en el calendario.",
        "Para borrar una nota, selecciona el día y pulsa 'Eliminar nota'.",
    ],
    "tips": [
        "💧 ¡Mantente hidratado! Bebe agua durante todo el día.",
        "🧘 Toma una pausa cada hora para estirarte y descansar la vista.",
        "📝 Escribe tus pendientes para mantenerte organizado y reducir el estrés.",
        "🌿 Sal un rato al aire libre: aire fresco y vitamina D.",
        "😊 Practica la gratitud: anota tres cosas por las que estás agradecido cada día.",
        "⏰ Prueba la técnica Pomodoro: 25 minutos de trabajo y 5 de descanso.",
        "📱 Limita las pantallas antes de dormir para descansar mejor.",
        "🏃 El ejercicio regular mejora el ánimo y la energía.",
        "🍎 Come de forma equilibrada para mantener la energía estable.",
        "🎯 Ponte metas pequeñas y alcanzables cada día.",
    ],
    "productivity": [
        "Empieza el día definiendo tus 3 prioridades y atiéndelas primero.",
        "Divide las tareas grandes en pasos pequeños; así pesan menos.",
        "Usa el calendario para agendar tareas y fechas límite importantes.",
        "Elimina distracciones con un espacio de trabajo dedicado.",
        "Toma descansos regulares: tu cerebro los necesita para concentrarse.",
        "Repasa tus notas al final del día para preparar el siguiente.",
    ],
    "default": [
        "No estoy seguro de entenderte. Prueba a preguntarme por:\n• Calendario y notas\n"
        "• Consejos de bienestar\n• Productividad\n• O escribe 'ayuda'.",
        "¡Quiero ayudarte! Puedes preguntarme:\n• Cómo usar el calendario\n• Consejos de salud\n"
        "• Estrategias de productividad\n• O escribe 'ayuda'.",
    ],
}

_GREETING = re.compile(r"^(hi|hello|hey|hola|buenos dias|buenas tardes|buenas noches|good morning|good afternoon|good evening)\b")

_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("help", ("help", "ayuda", "what can you", "que puedes")),
    ("count", ("how many", "cuantas notas", "cuantas tengo")),
    ("upcoming", ("upcoming", "due", "soon", "remind", "pronto", "proxima", "pendiente", "recuerd")),
    ("calendar", ("calendar", "calendario", "note", "nota", "date", "fecha", "add", "agreg", "save", "guard", "delete", "borr", "elimin")),
    ("tips", ("tip", "consejo", "advice", "wellness", "bienestar", "health", "salud", "suggest", "sugier", "recommend", "recomiend")),
    ("productivity", ("productiv", "focus", "concentr", "work", "trabaj", "task", "tarea", "organiz", "efficient", "eficien")),
]


def _strip_accents(text: str) -> str:
    return "".join(c for c in unicodedata.normalize("NFD", text) if unicodedata.category(c) != "Mn")


def classify(message: str) -> str:
    """Categoría del mensaje (greeting, help, count, upcoming, calendar, tips, productivity o default)."""
    norm = _strip_accents(message or "").lower().strip()
    if _GREETING.match(norm):
        return "greeting"
    for name, keywords in _RULES:
        if any(k in norm for k in keywords):
            return name
    return "default"


def _count_reply(notes: list[Dict[str, Any]]) -> str:
    n = len(notes)
    if n == 0:
        return "Aún no tienes notas. ¡Elige un día del calendario para agregar la primera!"
    plural = "nota guardada" if n == 1 else "notas guardadas"
    return f"Tienes {n} {plural} en tu calendario. ¡Sigue registrando tus ideas y tareas!"


def _upcoming_reply(notes: list[Dict[str, Any]], today: date) -> str:
    # Set nuevo: el chat siempre responde aunque el recordatorio ya se haya mostrado
    reminder = check_upcoming_tasks(notes, today, set())
    if reminder is None:
        return "No tienes tareas para hoy ni para los próximos 2 días. ¡Buen momento para planear!"
    lines = [f"🔔 {reminder['message'].split('🔔', 1)[-1].strip()}"]
    others = [n for n in upcoming_notes(notes, today) if n.get("id") != reminder["note_id"]][:3]
    for n in others:
        lines.append(f"• {n['date']}: {n['content'].strip()[:50]}")
    lines.append("")
    lines.append("Tienes tareas próximas. Revisa tu calendario para verlas todas.")
    return "\n".join(lines)


def respond(
    message: str,
    notes: Optional[Iterable[Dict[str, Any]]] = None,
    *,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Respuesta del asistente para `message` usando las notas del usuario."""
    if not isinstance(message, str) or not message.strip():
        raise ValueError("El mensaje es obligatorio.")
    rng = rng or random.Random()
    notes = list(notes or [])
    kind = classify(message)
    if kind == "count":
        return _count_reply(notes)
    if kind == "upcoming":
        return _upcoming_reply(notes, today or date.today())
    return rng.choice(RESPONSES[kind])
