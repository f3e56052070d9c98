"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging

from fastapi import FastAPI
from wellwork.core.config import settings
from wellwork.api.router import api_router
from wellwork.core.logging import setup_logging
from wellwork.core.middleware import add_middlewares
from wellwork.core.exceptions import register_exception_handlers
from wellwork.infrastructure.db.json_store import users_store, notes_store

_log = logging.getLogger("wellwork.startup")

setup_logging(settings.log_level)
app = FastAPI(title=settings.app_name)

add_middlewares(app)
register_exception_handlers(app)


@app.on_event("startup")
def on_startup():
    # Crea/valida los archivos JSON (los corruptos se reinician a [])
    users = users_store().read()
    notes = notes_store().read()
    _log.info("Almacén listo en %s (usuarios=%d, notas=%d)", settings.data_path, len(users), len(notes))


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("wellwork.main:app", host="0.0.0.0", port=settings.port)
