"""Monitor de conectividad: sondea `/health` y notifica transiciones.

Estados: "checking" (antes del primer resultado), "online", "offline".
- Un chequeo inmediato al activar y luego cada `interval` segundos.
- Cada chequeo lleva su `CancelToken`; uno nuevo cancela al anterior y
  `close()` cancela el que esté en curso.
- Un chequeo cancelado NO es una señal de offline: su resultado se descarta.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Literal, Optional

from wellwork.client.http import ApiClient, CancelToken, CancelledError, ClientError
from wellwork.client.scheduler import Scheduler, Timer
from wellwork.core.config import settings

ConnectivityState = Literal["checking", "online", "offline"]
CHECKING: ConnectivityState = "checking"
ONLINE: ConnectivityState = "online"
OFFLINE: ConnectivityState = "offline"

Listener = Callable[[ConnectivityState, ConnectivityState], None]

_log = logging.getLogger("wellwork.connectivity")


class ConnectivityMonitor:
    def __init__(self, api: ApiClient, scheduler: Scheduler, interval: Optional[float] = None) -> None:
        self.api = api
        self.scheduler = scheduler
        self.interval = interval or settings.health_check_interval_seconds
        self.state: ConnectivityState = CHECKING
        self._listeners: List[Listener] = []
        self._inflight: Optional[CancelToken] = None
        self._timer: Optional[Timer] = None
        self._closed = False

    @property
    def is_online(self) -> bool:
        return self.state == ONLINE

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registra `listener(previous, current)`; devuelve la función para desuscribir."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def start(self) -> None:
        if self._closed or self._timer is not None:
            return
        self.check_now()
        if self._closed:
            return
        self._timer = self.scheduler.call_every(self.interval, self.check_now, name="health-check")

    def check_now(self) -> ConnectivityState:
        """Un ciclo de chequeo. Devuelve el estado resultante."""
        if self._closed:
            return self.state
        if self._inflight is not None:
            # El ciclo nuevo reemplaza al que sigue en curso
            self._inflight.cancel()
        token = CancelToken()
        self._inflight = token
        try:
            self.api.health(cancel=token)
            result = ONLINE
        except CancelledError:
            _log.debug("Chequeo de salud cancelado")
            return self.state
        except ClientError as e:
            if token.cancelled:
                return self.state
            _log.warning("Chequeo de salud falló: %s", e)
            result = OFFLINE
        finally:
            if self._inflight is token:
                self._inflight = None
        self._set_state(result)
        return self.state

    def report_transport_failure(self) -> None:
        """Una llamada de la app se quedó sin respuesta: pasa a offline sin esperar al próximo ciclo."""
        if not self._closed:
            self._set_state(OFFLINE)

    def _set_state(self, new: ConnectivityState) -> None:
        prev = self.state
        if new == prev:
            return
        self.state = new
        _log.info("Conectividad: %s -> %s", prev, new)
        for listener in list(self._listeners):
            try:
                listener(prev, new)
            except Exception:
                _log.exception("Error notificando transición %s -> %s", prev, new)

    def close(self) -> None:
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._inflight is not None:
            self._inflight.cancel()
