"""Raíz de composición del cliente offline-first.

Arma almacenamiento, cola, cliente HTTP, monitor de conectividad,
reconciliador, editor de notas y notificaciones sobre un único `Scheduler`.
"""
from __future__ import annotations

import logging
import random
import threading
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from wellwork.client.connectivity import ConnectivityMonitor
from wellwork.client.http import ApiClient
from wellwork.client.notes import NoteEditor
from wellwork.client.notifications import Notification, TaskReminderWatcher, WellnessNotifier
from wellwork.client.queue import PendingOperation, PendingOperationQueue
from wellwork.client.reconciler import SyncReconciler, SyncReport
from wellwork.client.scheduler import Scheduler
from wellwork.client.storage import LocalStorage, NotesCache, SessionCache
from wellwork.core.config import settings
from wellwork.services import chat_service
from wellwork.services.calendar_service import render_month

_log = logging.getLogger("wellwork.client")


class WellWorkClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        storage_dir: Optional[Path | str] = None,
        *,
        http: Any = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        today: Callable[[], date] = date.today,
        on_notification: Optional[Callable[[Notification], None]] = None,
    ) -> None:
        self.storage = LocalStorage(storage_dir or settings.client_storage_path)
        self.session = SessionCache(self.storage)
        self.cache = NotesCache(self.storage)
        self.queue = PendingOperationQueue(self.storage, settings.sync_max_retries)
        self.api = ApiClient(base_url, token_provider=self.session.token, http=http)
        self.scheduler = scheduler or Scheduler()
        self.monitor = ConnectivityMonitor(self.api, self.scheduler)
        self.reconciler = SyncReconciler(self.api, self.queue, self.cache, self.session, monitor=self.monitor)
        self.monitor.subscribe(self.reconciler.on_connectivity_change)
        self.reconciler.on_dropped(self._on_dropped)
        self.notes = NoteEditor(
            self.api, self.cache, self.queue, self.session,
            reconciler=self.reconciler, monitor=self.monitor,
        )

        self.rng = rng or random.Random()
        self.today = today
        self.notifications: List[Notification] = []
        self._on_notification = on_notification
        self.wellness = WellnessNotifier(self.scheduler, self._emit, self.rng)
        self.reminders = TaskReminderWatcher(self.scheduler, self._cached_notes, self._emit, today=today)

    # --- Notificaciones ---
    def _emit(self, notification: Notification) -> None:
        self.notifications.append(notification)
        _log.info("[%s] %s", notification.kind, notification.message)
        if self._on_notification is not None:
            self._on_notification(notification)

    def _on_dropped(self, ops: List[PendingOperation]) -> None:
        self._emit(Notification(kind="sync", message=f"No se pudieron sincronizar {len(ops)} cambios."))

    def _cached_notes(self) -> List[Dict[str, Any]]:
        user_id = self.session.user_id()
        return self.cache.load(user_id) if user_id else []

    # --- Sesión ---
    @property
    def user(self) -> Optional[Dict[str, Any]]:
        s = self.session.load()
        return s["user"] if s else None

    def register(self, username: str, password: str) -> str:
        return self.api.register(username, password).get("message", "")

    def login(self, username: str, password: str) -> Dict[str, Any]:
        data = self.api.login(username, password)
        user = data.get("user") or {}
        previous = self.session.load()
        if previous and str(previous["user"].get("id")) != str(user.get("id")):
            # La cola pertenece a otra cuenta
            self.queue.clear()
        self.session.save({"token": data["token"], "user": user})
        if len(self.queue):
            self.reconciler.reconcile()
        return user

    def logout(self) -> None:
        self.session.clear()
        self.queue.clear()

    # --- Notas / asistente ---
    def ask(self, message: str) -> str:
        return chat_service.respond(message, self._cached_notes(), today=self.today(), rng=self.rng)

    def calendar(self, year: Optional[int] = None, month: Optional[int] = None) -> str:
        today = self.today()
        return render_month(year or today.year, month or today.month, self._cached_notes(), today=today)

    def sync_now(self) -> SyncReport:
        return self.reconciler.reconcile()

    def status(self) -> Dict[str, Any]:
        return {
            "connectivity": self.monitor.state,
            "sync": self.reconciler.state,
            "pending": len(self.queue),
            "user": self.user,
        }

    # --- Ciclo de vida ---
    def start(self) -> None:
        self.monitor.start()
        if settings.wellness_notifications_enabled:
            self.wellness.start()
        self.reminders.start()

    def run_forever(self, stop: Optional[threading.Event] = None) -> None:
        self.start()
        try:
            self.scheduler.run_forever(stop)
        finally:
            self.close()

    def close(self) -> None:
        self.monitor.close()
        self.wellness.stop()
        self.reminders.stop()
        self.scheduler.close()

    def __enter__(self) -> "WellWorkClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
