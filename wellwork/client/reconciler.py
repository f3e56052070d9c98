"""Reconciliación tras volver la conectividad.

Máquina de estados:

    synced --(primer chequeo fallido)--> degraded
    degraded --(primer chequeo OK)--> reconciling
    reconciling --(cola drenada + caché reescrita)--> synced

- Disparo por flanco: chequeos OK consecutivos no vuelven a reconciliar.
- A lo sumo una pasada a la vez (`_running`). Si la conectividad oscila a mitad
  de pasada, ésta termina y luego se reevalúa con el último estado conocido;
  si hubo una reconexión (offline -> online) y la cola no quedó vacía, se
  corre otra pasada en vez de declarar `synced`.
- La caché se reescribe completa con la verdad del servidor (sin merge), así la
  pasada es idempotente aunque caché y cola hayan quedado desfasadas.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Literal, Optional

from pydantic import BaseModel, Field

from wellwork.client.connectivity import CHECKING, OFFLINE, ONLINE, ConnectivityMonitor, ConnectivityState
from wellwork.client.http import ApiClient, ApiError, TransportError
from wellwork.client.queue import PendingOperation, PendingOperationQueue
from wellwork.client.storage import NotesCache, SessionCache

SyncState = Literal["synced", "degraded", "reconciling"]
SYNCED: SyncState = "synced"
DEGRADED: SyncState = "degraded"
RECONCILING: SyncState = "reconciling"

_log = logging.getLogger("wellwork.sync")


class SyncReport(BaseModel):
    replayed: int = 0
    failed: int = 0
    dropped: List[PendingOperation] = Field(default_factory=list)
    refreshed: bool = False
    skipped: bool = False


class SyncReconciler:
    def __init__(
        self,
        api: ApiClient,
        queue: PendingOperationQueue,
        cache: NotesCache,
        session: SessionCache,
        monitor: Optional[ConnectivityMonitor] = None,
    ) -> None:
        self.api = api
        self.queue = queue
        self.cache = cache
        self.session = session
        self.monitor = monitor
        self.state: SyncState = SYNCED
        self.last_report: Optional[SyncReport] = None
        self._connectivity: ConnectivityState = CHECKING
        self._running = False
        self._reconnected = False
        self._state_listeners: List[Callable[[SyncState, SyncState], None]] = []
        self._dropped_listeners: List[Callable[[List[PendingOperation]], None]] = []

    @property
    def is_degraded(self) -> bool:
        return self.state == DEGRADED

    def on_state_change(self, listener: Callable[[SyncState, SyncState], None]) -> None:
        self._state_listeners.append(listener)

    def on_dropped(self, listener: Callable[[List[PendingOperation]], None]) -> None:
        """`listener(ops)` recibe las operaciones descartadas por agotar reintentos."""
        self._dropped_listeners.append(listener)

    def _set_state(self, new: SyncState) -> None:
        prev = self.state
        if new == prev:
            return
        self.state = new
        _log.info("Sync: %s -> %s", prev, new)
        for listener in list(self._state_listeners):
            listener(prev, new)

    def on_connectivity_change(self, previous: ConnectivityState, current: ConnectivityState) -> None:
        """Listener del `ConnectivityMonitor`."""
        self._connectivity = current
        if self.state == RECONCILING and previous == OFFLINE and current == ONLINE:
            self._reconnected = True
        if current == OFFLINE:
            if self.state == SYNCED:
                self._set_state(DEGRADED)
            # reconciling: la pasada termina y se reevalúa al final
        elif current == ONLINE:
            if self.state == DEGRADED:
                self.reconcile()
            elif self.state == SYNCED and previous == CHECKING and len(self.queue):
                # Arranque con cola persistida de una ejecución anterior
                self.reconcile()

    def reconcile(self) -> SyncReport:
        """Drena la cola y reescribe la caché desde el servidor."""
        if self._running:
            _log.info("Reconciliación en curso; se ignora el nuevo disparo")
            return SyncReport(skipped=True)

        self._running = True
        self._reconnected = False
        report = SyncReport()
        lost_connection = False
        self._set_state(RECONCILING)
        try:
            lost_connection = self._run_pass(report)
            while (
                not lost_connection
                and self._reconnected
                and self._connectivity == ONLINE
                and len(self.queue)
            ):
                # Reconexión a mitad de pasada: lo que falló en el corte se reintenta ya
                self._reconnected = False
                _log.info("Reconexión durante la reconciliación; se repite la pasada")
                lost_connection = self._run_pass(report)
            return report
        finally:
            self._running = False
            self._reconnected = False
            self.last_report = report
            if lost_connection and self.monitor is not None:
                # El monitor pasa a offline; el próximo chequeo OK vuelve a disparar
                self.monitor.report_transport_failure()
            if lost_connection or self._connectivity == OFFLINE:
                self._set_state(DEGRADED)
            else:
                self._set_state(SYNCED)
            if report.dropped:
                for listener in list(self._dropped_listeners):
                    listener(report.dropped)

    def _run_pass(self, report: SyncReport) -> bool:
        """Una pasada (drenar + refrescar) acumulada en `report`. True si se perdió la conexión."""
        user_id = self.session.user_id()
        if not user_id:
            report.skipped = True
            return False

        drained = self.queue.drain(self.api.replay)
        report.replayed += len(drained.succeeded)
        report.failed = len(drained.failed)
        report.dropped.extend(drained.dropped)

        lost_connection = False
        report.refreshed = False
        try:
            notes = self.api.list_notes()
        except TransportError as e:
            _log.warning("No se pudo refrescar la caché: %s", e)
            lost_connection = True
        except ApiError as e:
            _log.warning("El servidor rechazó el refresco de notas: %s", e)
        else:
            self.cache.save(user_id, notes)
            report.refreshed = True
        _log.info(
            "Reconciliación: replayed=%d failed=%d dropped=%d refreshed=%s",
            report.replayed, report.failed, len(report.dropped), report.refreshed,
        )
        return lost_connection
