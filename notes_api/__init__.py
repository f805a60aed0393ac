"""
Notes API — Application Package Initializer
============================================

What: Marks the `notes_api` directory as a Python package.
Who:  Imported by uvicorn, Alembic, pytest and the `notes-api` console script.

Architecture Note:
    The service is a thin HTTP-to-database adapter with two layers:

    ┌─────────────────────────────────────┐
    │        Routes (Note API Handler)    │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (Note Store)        │  ← CRUD over the notes table
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Routes never touch SQLAlchemy; the store never sees an HTTP request.
"""

__version__ = "1.0.0"
