"""
Notes API — Note Store
=======================

What:  Durable CRUD over Note records.
How:   Owns an async SQLAlchemy engine and session factory. Each operation
       runs in its own session and transaction; driver failures are wrapped
       in StoreUnavailableError, missing rows become NotFoundError and
       malformed ids become InvalidIdError.
Who:   Constructed by the application lifespan (main.py), injected into the
       notes routes through `get_note_store`.

Lifecycle:
    store = NoteStore.from_settings(settings)
    await store.open(...)     # connectivity check, retried with backoff
    ...                       # serve requests
    await store.close()       # dispose engine, close pooled connections

Concurrency:
    The store holds no mutable state besides the engine's connection pool,
    so one instance is shared by all concurrent requests. Concurrent writes
    to the same id are last-write-wins under the database's own control.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, List, Optional, Union

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from notes_api.config import Settings
from notes_api.database import build_engine, build_session_factory
from notes_api.exceptions import (
    InvalidIdError,
    NotFoundError,
    NotesAPIError,
    StoreUnavailableError,
)
from notes_api.models.note import Note

logger = logging.getLogger(__name__)

NoteId = Union[str, uuid.UUID]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_note_id(raw_id: NoteId) -> uuid.UUID:
    """
    Convert a path identifier into the store's native UUID.

    Raises:
        InvalidIdError: `raw_id` is not a well-formed UUID
    """
    if isinstance(raw_id, uuid.UUID):
        return raw_id
    try:
        return uuid.UUID(str(raw_id))
    except ValueError:
        raise InvalidIdError(raw_id=str(raw_id))


class NoteStore:
    """
    Persistence abstraction over the `notes` table.

    Operations:
        list_all()                  → every Note, order unspecified
        find_by_id(id)              → Note | NotFoundError | InvalidIdError
        create(title, text)         → stored Note with generated fields
        update(id, title, text)     → post-update Note | NotFoundError
        delete(id)                  → None | NotFoundError
        ping()                      → None | StoreUnavailableError

    Absent (None) title/text values are stored as "".
    """

    def __init__(
        self,
        engine: AsyncEngine,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.engine = engine
        self._session_factory = build_session_factory(engine)
        self._clock = clock

    @classmethod
    def from_url(
        cls,
        url: str,
        clock: Callable[[], datetime] = utc_now,
        **engine_options,
    ) -> "NoteStore":
        """Build a store with its own engine for `url`."""
        return cls(build_engine(url, **engine_options), clock=clock)

    @classmethod
    def from_settings(cls, settings: Settings) -> "NoteStore":
        """Build a store from application settings."""
        return cls.from_url(
            settings.database_uri,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def open(
        self,
        attempts: int = 1,
        min_wait: float = 1.0,
        max_wait: float = 10.0,
    ) -> None:
        """
        Verify the database is reachable before serving traffic.

        Retries `ping()` with exponential backoff and jitter. Once `attempts`
        are exhausted the last StoreUnavailableError propagates, so startup
        fails fast instead of serving a broken API.
        """
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(StoreUnavailableError),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential_jitter(initial=min_wait, max=max_wait, jitter=min_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await self.ping()
        logger.info("Note store connected: %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        """Dispose the engine, closing every pooled connection."""
        await self.engine.dispose()
        logger.info("Note store closed")

    # ── Internal helpers ──────────────────────────────────────────────────

    @asynccontextmanager
    async def _transaction(self, operation: str, **context) -> AsyncIterator[AsyncSession]:
        """
        One session + transaction per operation.

        Commits when the block exits cleanly, rolls back otherwise. Our own
        typed errors pass through untouched; driver errors are logged with
        context and re-raised as StoreUnavailableError.
        """
        try:
            async with self._session_factory() as session, session.begin():
                yield session
        except NotesAPIError:
            raise
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Note store %s failed: %s | Context: %s",
                operation,
                str(e),
                context,
            )
            raise StoreUnavailableError(
                context={"operation": operation, "error_type": type(e).__name__, **context},
            ) from e

    # ── Operations ────────────────────────────────────────────────────────

    async def ping(self) -> None:
        """Lightweight connectivity check (SELECT 1)."""
        async with self._transaction("ping") as session:
            await session.execute(text("SELECT 1"))

    async def list_all(self) -> List[Note]:
        """Every stored Note. Order is whatever the database returns."""
        async with self._transaction("list_all") as session:
            result = await session.execute(select(Note))
            return list(result.scalars().all())

    async def find_by_id(self, note_id: NoteId) -> Note:
        """
        Fetch one Note.

        Raises:
            InvalidIdError: malformed id
            NotFoundError: no Note with this id
            StoreUnavailableError: query failed
        """
        nid = parse_note_id(note_id)
        async with self._transaction("find_by_id", note_id=str(nid)) as session:
            note = await session.get(Note, nid)
            if note is None:
                raise NotFoundError(resource="note", resource_id=str(nid))
            return note

    async def create(self, title: Optional[str], text: Optional[str]) -> Note:
        """
        Insert a new Note.

        created_at and updated_at come from a single clock reading, so a
        freshly created Note always has createdAt == updatedAt.
        """
        now = self._clock()
        note = Note(
            id=uuid.uuid4(),
            title=title or "",
            text=text or "",
            created_at=now,
            updated_at=now,
        )
        async with self._transaction("create") as session:
            session.add(note)
        logger.info("Note created: %s", note.id)
        return note

    async def update(self, note_id: NoteId, title: Optional[str], text: Optional[str]) -> Note:
        """
        Overwrite title and text of an existing Note and bump updated_at.

        Both fields are replaced; a None value clears the field. Returns the
        Note as it is after the update.

        Raises:
            InvalidIdError, NotFoundError, StoreUnavailableError
        """
        nid = parse_note_id(note_id)
        async with self._transaction("update", note_id=str(nid)) as session:
            note = await session.get(Note, nid)
            if note is None:
                raise NotFoundError(resource="note", resource_id=str(nid))
            note.title = title or ""
            note.text = text or ""
            note.updated_at = self._clock()
        logger.info("Note updated: %s", nid)
        return note

    async def delete(self, note_id: NoteId) -> None:
        """
        Remove a Note.

        Raises:
            InvalidIdError, StoreUnavailableError
            NotFoundError: nothing was deleted
        """
        nid = parse_note_id(note_id)
        async with self._transaction("delete", note_id=str(nid)) as session:
            result = await session.execute(delete(Note).where(Note.id == nid))
            if result.rowcount == 0:
                raise NotFoundError(resource="note", resource_id=str(nid))
        logger.info("Note deleted: %s", nid)
