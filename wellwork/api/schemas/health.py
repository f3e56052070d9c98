"""Schemas para endpoints de health."""
from pydantic import BaseModel


class HealthOut(BaseModel):
    status: str
    time: str
