"""
Notes API — FastAPI Dependencies
=================================

What:  Providers that hand request handlers the objects they need.
How:   The NoteStore is opened by the lifespan and parked on `app.state`;
       `get_note_store` reads it back for each request. Tests swap the store
       through `app.dependency_overrides[get_note_store]`.
"""

from fastapi import Request

from notes_api.services.note_store import NoteStore


def get_note_store(request: Request) -> NoteStore:
    """Return the NoteStore opened for this application instance."""
    return request.app.state.note_store
