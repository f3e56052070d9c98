"""Planificador explícito de temporizadores (reemplaza intervalos globales sueltos).

- Un único hilo lógico: los callbacks corren dentro de `run_pending()`, en orden
  de vencimiento.
- Reloj inyectable (`clock`) para que los tests avancen el tiempo a mano.
- `close()` cancela todo: ningún temporizador sobrevive al dueño.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

_log = logging.getLogger("wellwork.scheduler")


class Timer:
    """Handle de un callback programado (único o periódico)."""

    def __init__(self, callback: Callable[[], None], due: float, interval: Optional[float] = None, name: str = "") -> None:
        self.callback = callback
        self.due = due
        self.interval = interval
        self.name = name or getattr(callback, "__name__", "timer")
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._heap: List[Tuple[float, int, Timer]] = []
        self._seq = itertools.count()
        self.closed = False

    def _push(self, timer: Timer) -> Timer:
        if self.closed:
            raise RuntimeError("scheduler cerrado")
        heapq.heappush(self._heap, (timer.due, next(self._seq), timer))
        return timer

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> Timer:
        return self._push(Timer(callback, self.clock() + max(0.0, delay), name=name))

    def call_every(self, interval: float, callback: Callable[[], None], *, immediate: bool = False, name: str = "") -> Timer:
        if interval <= 0:
            raise ValueError("interval debe ser > 0")
        first = 0.0 if immediate else interval
        return self._push(Timer(callback, self.clock() + first, interval=interval, name=name))

    def next_due(self) -> Optional[float]:
        """Vencimiento más próximo (ignora cancelados)."""
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)
        return self._heap[0][0] if self._heap else None

    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def run_pending(self) -> int:
        """Ejecuta los callbacks vencidos; devuelve cuántos corrieron.

        Un error en un callback se registra y no detiene al resto.
        """
        ran = 0
        now = self.clock()
        while not self.closed and self._heap and self._heap[0][0] <= now:
            _, _, timer = heapq.heappop(self._heap)
            if timer.cancelled:
                continue
            try:
                timer.callback()
            except Exception:
                _log.exception("Error en temporizador %s", timer.name)
            ran += 1
            if timer.interval is not None and not timer.cancelled and not self.closed:
                # Periódico: se reprograma desde su vencimiento; si hubo atraso, sin ráfagas
                timer.due += timer.interval
                if timer.due <= now:
                    timer.due = now + timer.interval
                self._push(timer)
        return ran

    def run_forever(self, stop: Optional[threading.Event] = None, max_wait: float = 1.0) -> None:
        """Bucle principal: corre vencidos y espera hasta el siguiente (o `stop`)."""
        stop = stop or threading.Event()
        while not self.closed and not stop.is_set():
            self.run_pending()
            due = self.next_due()
            wait = max_wait if due is None else min(max_wait, max(0.0, due - self.clock()))
            stop.wait(wait)

    def close(self) -> None:
        for _, _, timer in self._heap:
            timer.cancel()
        self._heap.clear()
        self.closed = True
