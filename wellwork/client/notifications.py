"""Notificaciones locales: consejos de bienestar aleatorios y recordatorios de tareas.

Ambos programan sus temporizadores en el `Scheduler` del cliente y entregan
cada aviso a un `sink(notification)` (la app decide cómo mostrarlo).
"""
from __future__ import annotations

import logging
import random
from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional, Set

from pydantic import BaseModel, Field

from wellwork.client.scheduler import Scheduler, Timer
from wellwork.core.config import settings
from wellwork.core.time import now_iso
from wellwork.services.reminder_service import check_upcoming_tasks

NotificationKind = Literal["wellness", "task", "sync"]

_log = logging.getLogger("wellwork.notifications")

WELLNESS_MESSAGES = [
    "💧 ¡Toma agua si te sientes cansado!",
    "🌿 Respira hondo y relájate.",
    "☀️ Sal a tomar un poco de aire fresco.",
    "🧘 Tómate 5 minutos para estirarte.",
    "💪 ¡Lo estás haciendo muy bien! Sigue así.",
    "🍎 Recuerda comer algo saludable.",
    "👀 Aparta la vista de la pantalla por 20 segundos.",
    "🚶 Levántate y camina un rato.",
    "😊 ¡Sonríe! Libera endorfinas.",
    "🎵 Escucha tu canción favorita.",
    "📚 Lee algo que te inspire.",
    "🌱 Riega tus plantas si tienes alguna.",
    "✨ Mereces un momento de paz.",
    "🎯 Concéntrate en una tarea a la vez.",
    "🌟 ¡Siéntete orgulloso de tu progreso!",
]

FIRST_DELAY_RANGE = (10.0, 60.0)


class Notification(BaseModel):
    kind: NotificationKind
    message: str
    created_at: str = Field(default_factory=now_iso)


Sink = Callable[[Notification], None]


def random_delay(rng: random.Random) -> float:
    """Segundos hasta el próximo consejo: 40% 10-60 s, 40% 1-10 min, 20% 1-3 h."""
    unit = rng.random()
    if unit < 0.4:
        return rng.uniform(10, 60)
    if unit < 0.8:
        return rng.uniform(60, 600)
    return rng.uniform(3600, 3 * 3600)


class WellnessNotifier:
    def __init__(self, scheduler: Scheduler, sink: Sink, rng: Optional[random.Random] = None) -> None:
        self.scheduler = scheduler
        self.sink = sink
        self.rng = rng or random.Random()
        self._timer: Optional[Timer] = None

    @property
    def active(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        if self._timer is not None:
            return
        self._timer = self.scheduler.call_later(self.rng.uniform(*FIRST_DELAY_RANGE), self._fire, name="wellness")

    def _fire(self) -> None:
        self.sink(Notification(kind="wellness", message=self.rng.choice(WELLNESS_MESSAGES)))
        self._timer = self.scheduler.call_later(random_delay(self.rng), self._fire, name="wellness")

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class TaskReminderWatcher:
    """Revisa periódicamente las notas y avisa de la tarea más urgente.

    Cada nota se recuerda una vez por día; el registro de avisos se reinicia
    al cambiar la fecha.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        notes_provider: Callable[[], List[Dict[str, Any]]],
        sink: Sink,
        *,
        today: Callable[[], date] = date.today,
        interval_minutes: Optional[float] = None,
        initial_delay: Optional[float] = None,
    ) -> None:
        self.scheduler = scheduler
        self.notes_provider = notes_provider
        self.sink = sink
        self.today = today
        self.interval = (interval_minutes or settings.reminder_interval_minutes) * 60
        self.initial_delay = settings.reminder_initial_delay_seconds if initial_delay is None else initial_delay
        self.shown: Set[str] = set()
        self._day: Optional[date] = None
        self._timers: List[Timer] = []

    def start(self) -> None:
        if self._timers:
            return
        self._timers = [
            self.scheduler.call_later(self.initial_delay, self.check, name="task-reminder-first"),
            self.scheduler.call_every(self.interval, self.check, name="task-reminder"),
        ]

    def check(self) -> Optional[Notification]:
        today = self.today()
        if today != self._day:
            self.shown = set()
            self._day = today
        notes = self.notes_provider()
        if not notes:
            return None
        reminder = check_upcoming_tasks(notes, today, self.shown)
        if reminder is None:
            return None
        _log.info("Recordatorio para nota %s (%s)", reminder["note_id"], reminder["date"])
        notification = Notification(kind="task", message=reminder["message"])
        self.sink(notification)
        return notification

    def stop(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []
