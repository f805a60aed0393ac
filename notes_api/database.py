"""
Notes API — Database Engine Construction
=========================================

What:  Declarative base for the ORM models and the async engine/session factory builder.
How:   `build_engine()` creates an async engine with connection pooling;
       `build_session_factory()` binds an `async_sessionmaker` to it.
Who:   NoteStore (owns the engine) and Alembic's env.py (reads Base.metadata).

Nothing here is created at import time. The engine belongs to the NoteStore,
which the application lifespan opens on startup and closes on shutdown.

Connection Pooling Strategy:
    pool_size:        Persistent connections for normal load
    max_overflow:     Temporary connections for traffic spikes
    pool_pre_ping:    Validates connections before use (survives DB restarts)
    pool_recycle=3600: Recycles connections every hour
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic uses for migrations and the
    test suite uses to create tables in a throwaway SQLite file.
    """
    pass


def build_engine(
    url: str,
    pool_size: int = 10,
    max_overflow: int = 5,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> AsyncEngine:
    """
    Create the async engine for `url`.

    SQLite (aiosqlite) gets the dialect's default pool; pool sizing only
    applies to server databases such as PostgreSQL.
    """
    if make_url(url).get_backend_name() == "sqlite":
        return create_async_engine(url, echo=echo)

    return create_async_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Bind a session factory to `engine`.

    expire_on_commit=False keeps attribute values readable after commit, so
    a Note can be serialized once its transaction has closed.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
