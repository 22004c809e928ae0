"""
Aula Web Backend — Database Engine & Session Factory
======================================================

What:  Async SQLAlchemy engine/session helpers for the embedded SQLite file.
Why:   Keeps connection details in one place; the StudentStore owns the
       engine built here and the app never touches a module-level handle.
How:   create_async_engine over the aiosqlite driver, one AsyncSession per
       store operation, schema created with metadata.create_all.

Why aiosqlite:
    The database is a single local file, but queries are still awaited so a
    slow disk does not stall other in-flight requests on the event loop.
    SQLite itself serializes concurrent writers.
"""

import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def ensure_sqlite_directory(database_url: str) -> None:
    """
    Create the parent directory of a file-backed SQLite database.

    No-op for in-memory SQLite and for non-SQLite URLs.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the Record Store.

    Engine creation is lazy: no connection is opened until the first query.
    """
    return create_async_engine(database_url, echo=echo)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: returned ORM objects stay readable after commit
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """
    Create missing tables. Existing tables and rows are left untouched.
    """
    # Register models on Base.metadata before create_all
    from aulaweb.models import student  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
