"""
Notes API — Notes Route Handlers
=================================

What:  The Note API Handler: CRUD over /notes.
How:   Parses path/body, delegates to the injected NoteStore, returns JSON.
       A request without a body counts as {}.
       Store errors propagate as exceptions to the global handlers in main.py,
       so a failed store call can never fall through to a success response.

Routes:
    GET    /notes         → list_all      200
    GET    /notes/{id}    → find_by_id    200 | 400 | 404
    POST   /notes         → create        201
    PUT    /notes/{id}    → update        200 | 400 | 404
    DELETE /notes/{id}    → delete        200 | 400 | 404

`note_id` is taken as a plain string so malformed ids reach the store and
surface as InvalidIdError (400) rather than FastAPI's 422.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status

from notes_api.dependencies import get_note_store
from notes_api.schemas.note import DeleteResponse, ErrorResponse, NoteIn, NoteOut
from notes_api.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])

_ID_ERRORS = {
    400: {"description": "Malformed note id or invalid body", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[NoteOut],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List every note",
)
async def list_notes(store: NoteStore = Depends(get_note_store)) -> List[NoteOut]:
    """Return all stored notes. Order is not guaranteed."""
    notes = await store.list_all()
    return [NoteOut.model_validate(note) for note in notes]


@router.get(
    "/{note_id}",
    response_model=NoteOut,
    responses=_ID_ERRORS,
    summary="Get a single note by ID",
)
async def get_note(note_id: str, store: NoteStore = Depends(get_note_store)) -> NoteOut:
    note = await store.find_by_id(note_id)
    return NoteOut.model_validate(note)


@router.post(
    "",
    response_model=NoteOut,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: Optional[NoteIn] = Body(default=None),
    store: NoteStore = Depends(get_note_store),
) -> NoteOut:
    """
    Create a note from an optional title and text.

    Returns the stored note including its generated id and timestamps
    (createdAt == updatedAt).
    """
    payload = payload or NoteIn()
    note = await store.create(title=payload.title, text=payload.text)
    return NoteOut.model_validate(note)


@router.put(
    "/{note_id}",
    response_model=NoteOut,
    responses=_ID_ERRORS,
    summary="Replace a note's title and text",
)
async def update_note(
    note_id: str,
    payload: Optional[NoteIn] = Body(default=None),
    store: NoteStore = Depends(get_note_store),
) -> NoteOut:
    """
    Full-replace update of title and text.

    A field missing from the body is cleared, not kept. The response is
    the note as stored after the update.
    """
    payload = payload or NoteIn()
    note = await store.update(note_id, title=payload.title, text=payload.text)
    return NoteOut.model_validate(note)


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
    responses=_ID_ERRORS,
    summary="Delete a note",
)
async def delete_note(note_id: str, store: NoteStore = Depends(get_note_store)) -> DeleteResponse:
    await store.delete(note_id)
    return DeleteResponse()
