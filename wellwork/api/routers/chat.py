"""
Endpoints del asistente guionado y recordatorios de tareas.
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException

from wellwork.api.deps import get_current_user
from wellwork.api.schemas.chat import ChatAskPayload, ChatAskOut, UpcomingOut, ReminderOut
from wellwork.services import chat_service, note_service, reminder_service


router = APIRouter(prefix="/api", tags=["Chat"])


@router.post("/chat", response_model=ChatAskOut, summary="Preguntar al asistente")
def ask(payload: ChatAskPayload, user: Dict[str, Any] = Depends(get_current_user)) -> ChatAskOut:
    try:
        reply = chat_service.respond(payload.message or "", note_service.list_notes(user["id"]))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ChatAskOut(reply=reply)


@router.get("/reminders/upcoming", response_model=UpcomingOut, summary="Tarea más urgente (hoy a +2 días)")
def upcoming(user: Dict[str, Any] = Depends(get_current_user)) -> UpcomingOut:
    reminder = reminder_service.check_upcoming_tasks(note_service.list_notes(user["id"]))
    return UpcomingOut(reminder=ReminderOut(**reminder) if reminder else None)
