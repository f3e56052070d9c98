"""
Esquemas del asistente guionado y recordatorios.
"""
from typing import Optional
from pydantic import BaseModel


class ChatAskPayload(BaseModel):
    message: Optional[str] = None


class ChatAskOut(BaseModel):
    reply: str


class ReminderOut(BaseModel):
    message: str
    note_id: str
    date: str


class UpcomingOut(BaseModel):
    reminder: Optional[ReminderOut] = None
