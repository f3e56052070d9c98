"""
Endpoints de notas del calendario (protegidos con Bearer token).

Todas las mutaciones devuelven la lista completa de notas del usuario.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException, status

from wellwork.api.deps import get_current_user
from wellwork.api.schemas.note import NoteCreate, NoteOut, NoteUpdate
from wellwork.services import note_service


router = APIRouter(prefix="/api/notes", tags=["Notes"])


@router.get("", response_model=List[NoteOut], summary="Listar notas del usuario")
def get_notes(user: Dict[str, Any] = Depends(get_current_user)):
    return note_service.list_notes(user["id"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=List[NoteOut],
    summary="Crear o actualizar nota",
    description="Upsert por fecha: una nota por usuario y día.",
)
def save_note(payload: NoteCreate, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return note_service.save_note(user["id"], payload.date, payload.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{note_id}", response_model=List[NoteOut], summary="Actualizar nota por id")
def update_note(note_id: str, payload: NoteUpdate, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return note_service.update_note(user["id"], note_id, payload.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError:
        raise HTTPException(status_code=404, detail="Nota no encontrada.")


@router.delete("/{note_id}", response_model=List[NoteOut], summary="Eliminar nota por id")
def delete_note(note_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        return note_service.delete_note(user["id"], note_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Nota no encontrada.")
