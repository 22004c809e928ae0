"""
Aula Web Backend — Student Record Store
=========================================

What:  Durable storage of student rows in a single SQLite table.
Why:   One explicit object owns the engine and session factory; it is built
       once at startup, kept on app.state and injected into route handlers.
How:   Async SQLAlchemy; each operation opens its own session and either
       commits or rolls back. Driver errors become StorageError.
Who:   Called by the student routes through student_service.
"""

import logging
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from aulaweb.database import (
    build_engine,
    build_session_factory,
    create_schema,
    ensure_sqlite_directory,
)
from aulaweb.exceptions import StorageError
from aulaweb.models.student import Student

logger = logging.getLogger(__name__)


def _driver_message(exc: SQLAlchemyError) -> str:
    """The underlying DBAPI message, e.g. 'no such table: students'."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class StudentStore:
    """
    Record Store for StudentRecord rows.

    Responsibilities:
        - init_schema(): create data directory and table if absent
        - list_all(): every row, newest id first
        - insert(): add one row and return it with id and created_at
        - dispose(): release pooled connections on shutdown
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine: AsyncEngine = build_engine(database_url, echo=echo)
        self._session_factory: async_sessionmaker[AsyncSession] = build_session_factory(
            self.engine
        )

    async def init_schema(self) -> None:
        """
        Idempotent schema initialization ("create if not exists").

        Raises:
            StorageError: The directory or database file could not be created.
        """
        try:
            ensure_sqlite_directory(self.database_url)
            await create_schema(self.engine)
        except (OSError, SQLAlchemyError) as e:
            logger.error("Could not initialize database at %s: %s", self.engine.url, e)
            raise StorageError(
                message=str(e),
                context={"database_url": str(self.engine.url)},
            ) from e
        logger.info("SQLite DB ready at %s", self.engine.url.database)

    async def list_all(self) -> List[Student]:
        """
        Return the whole table ordered by id descending. No pagination.

        Raises:
            StorageError: Query failed (database unreachable, table missing).
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Student).order_by(desc(Student.id)))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing students: %s", e, exc_info=True)
            raise StorageError(
                message=_driver_message(e),
                context={"operation": "list_all", "error_type": type(e).__name__},
            ) from e

    async def insert(self, nombre: str, apellido: str, materia: str, anio: int) -> Student:
        """
        Insert one student and return it with its assigned id and created_at.

        Raises:
            StorageError: Constraint violation, a value the driver cannot bind
                (e.g. an integer outside SQLite's 64-bit range) or I/O failure;
                nothing is persisted.
        """
        student = Student(nombre=nombre, apellido=apellido, materia=materia, anio=anio)
        async with self._session_factory() as session:
            try:
                session.add(student)
                await session.commit()
            except (SQLAlchemyError, OverflowError) as e:
                await session.rollback()
                logger.error("Database error inserting student: %s", e, exc_info=True)
                message = _driver_message(e) if isinstance(e, SQLAlchemyError) else str(e)
                raise StorageError(
                    message=message,
                    context={"operation": "insert", "error_type": type(e).__name__},
                ) from e

        # Names stay out of the log
        logger.info("Student %d stored", student.id)
        return student

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()
