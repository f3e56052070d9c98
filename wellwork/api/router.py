"""Agregador de routers de la API."""
from fastapi import APIRouter
from wellwork.api.routers import health, auth, notes, chat

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(notes.router)
api_router.include_router(chat.router)
