"""
Esquemas Pydantic para notas del calendario.

Convenciones:
- Atributos en snake_case; en el wire se usan los nombres del cliente
  (`userId`, `createdAt`, `updatedAt`) vía alias.
- Timestamps en ISO-8601 UTC (sellados en el repositorio).
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    date: Optional[str] = None
    content: Optional[str] = None


class NoteUpdate(BaseModel):
    content: Optional[str] = None


class NoteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    date: str
    content: str
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
