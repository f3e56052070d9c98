"""Cola durable de operaciones pendientes (mutaciones que fallaron por conectividad).

Semántica de `drain`:
- Recorre en orden de llegada (la más antigua primero).
- Éxito: la operación se elimina, y sólo entonces (entrega al-menos-una-vez).
- Fallo: `retry_count += 1`; si supera `max_retries` se descarta con WARNING.
- Se persiste después de cada operación: un corte a mitad deja un estado consistente.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from wellwork.client.http import ClientError
from wellwork.client.storage import STORAGE_PREFIX, LocalStorage

QUEUE_KEY = f"{STORAGE_PREFIX}sync_queue"
DEFAULT_MAX_RETRIES = 5

_log = logging.getLogger("wellwork.sync")


class PendingOperation(BaseModel):
    method: Literal["POST", "PUT", "DELETE"]
    path: str
    body: Optional[Dict[str, Any]] = None
    enqueued_at: float = Field(default_factory=time.time)
    retry_count: int = 0

    def describe(self) -> str:
        return f"{self.method} {self.path}"


class DrainResult(BaseModel):
    succeeded: List[PendingOperation] = Field(default_factory=list)
    failed: List[PendingOperation] = Field(default_factory=list)
    dropped: List[PendingOperation] = Field(default_factory=list)


class PendingOperationQueue:
    def __init__(self, storage: LocalStorage, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self.storage = storage
        self.max_retries = max_retries

    def _load(self) -> List[PendingOperation]:
        raw = self.storage.get_item(QUEUE_KEY, [])
        if not isinstance(raw, list):
            return []
        ops = []
        for item in raw:
            try:
                ops.append(PendingOperation.model_validate(item))
            except ValidationError:
                _log.error("Operación pendiente inválida, se descarta: %r", item)
        return ops

    def _persist(self, ops: List[PendingOperation]) -> None:
        if ops:
            self.storage.set_item(QUEUE_KEY, [op.model_dump(mode="json") for op in ops])
        else:
            self.storage.remove_item(QUEUE_KEY)

    def enqueue(self, operation: PendingOperation) -> PendingOperation:
        """Agrega al final con `retry_count = 0` y persiste de inmediato."""
        op = operation.model_copy(update={"retry_count": 0})
        ops = self._load()
        ops.append(op)
        self._persist(ops)
        _log.info("Operación en cola: %s (pendientes=%d)", op.describe(), len(ops))
        return op

    def peek_all(self) -> List[PendingOperation]:
        return self._load()

    def clear(self) -> None:
        self.storage.remove_item(QUEUE_KEY)

    def discard(self, predicate: Callable[[PendingOperation], bool]) -> int:
        """Quita las operaciones que cumplen `predicate`; devuelve cuántas."""
        ops = self._load()
        kept = [op for op in ops if not predicate(op)]
        if len(kept) != len(ops):
            self._persist(kept)
        return len(ops) - len(kept)

    def __len__(self) -> int:
        return len(self._load())

    def drain(self, executor: Callable[[PendingOperation], Any]) -> DrainResult:
        """Reintenta cada operación con `executor` (que lanza `ClientError` si falla)."""
        result = DrainResult()
        ops = self._load()
        if not ops:
            return result

        _log.info("Reintentando %d operaciones en cola...", len(ops))
        i = 0
        while i < len(ops):
            op = ops[i]
            try:
                executor(op)
            except ClientError as e:
                op.retry_count += 1
                if op.retry_count > self.max_retries:
                    ops.pop(i)
                    result.dropped.append(op)
                    _log.warning("Se descarta tras %d intentos: %s (%s)", op.retry_count, op.describe(), e)
                else:
                    result.failed.append(op)
                    i += 1
                self._persist(ops)
                continue
            ops.pop(i)
            result.succeeded.append(op)
            self._persist(ops)
            _log.info("Sincronizado: %s", op.describe())
        return result
