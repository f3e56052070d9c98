"""Middlewares del servidor WellWork.

- `X-Request-Id`: se respeta el que manda el cliente o se genera uno; viaja
  en la respuesta y en el sobre de error.
- Una línea de log por petición (`wellwork.request`).
- CORS para el cliente web, según `settings.cors_*`.
"""
import logging
import time
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from wellwork.core.config import settings


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        request.state.request_id = rid
        response = await call_next(request)
        response.headers["X-Request-Id"] = rid
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("wellwork.request")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 0
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt_ms = int((time.perf_counter() - start) * 1000)
            rid = getattr(request.state, "request_id", None)
            self.log.info(
                "method=%s path=%s status=%s latency_ms=%s request_id=%s",
                request.method, request.url.path, status, dt_ms, rid,
            )


def _cors_options() -> dict:
    if settings.cors_allow_any:
        # Token en Authorization, sin cookies: cualquier origen sin credentials
        return dict(
            allow_origin_regex=".*",
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
            allow_credentials=False,
        )
    return dict(
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
        allow_credentials=True,
    )


def add_middlewares(app: FastAPI) -> None:
    app.add_middleware(CORSMiddleware, **_cors_options())
    app.add_middleware(LoggingMiddleware)
    # Exterior: el request id ya existe cuando LoggingMiddleware escribe la línea
    app.add_middleware(RequestIdMiddleware)
