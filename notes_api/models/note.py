"""
Notes API — Note SQLAlchemy Model
==================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteStore for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, generated in Python at creation and never changed
    - title / text: unbounded TEXT, stored as "" when absent
    - created_at: set once at creation (UTC, timezone-aware)
    - updated_at: equal to created_at on insert, overwritten on every update

    The portable `Uuid` and `DateTime(timezone=True)` types map to native
    UUID / TIMESTAMPTZ on PostgreSQL and to text columns on SQLite.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Text, Uuid
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp on every backend.

    PostgreSQL returns aware values already; SQLite drops the offset, so
    naive values read back are tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Note(Base):
    """
    A titled block of text with creation/update timestamps.

    Lifecycle:
        1. Created by NoteStore.create (created_at == updated_at)
        2. Rewritten by NoteStore.update (title, text, updated_at)
        3. Removed by NoteStore.delete; there is no soft-delete
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"updated_at='{self.updated_at}')>"
        )
