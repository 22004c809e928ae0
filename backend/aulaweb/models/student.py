"""
Aula Web Backend — Student SQLAlchemy Model
=============================================

What:  ORM model for the `students` table in the embedded SQLite file.
Who:   Used by StudentStore for list/insert and by create_schema().

Table Design:
    - INTEGER PRIMARY KEY AUTOINCREMENT: ids only ever grow and are never
      handed out again, even after rows are removed externally
    - nombre / apellido / materia: free text, all NOT NULL
    - anio: integer year, NOT NULL
    - created_at: stamped at insert time; clients cannot set it
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from aulaweb.database import Base


class Student(Base):
    """
    A student enrolled in a subject.

    Lifecycle:
        Created by POST /api/students; never updated or deleted by the API.
    """

    __tablename__ = "students"

    # sqlite_autoincrement emits AUTOINCREMENT so ids are never reused
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nombre: Mapped[str] = mapped_column(Text, nullable=False)
    apellido: Mapped[str] = mapped_column(Text, nullable=False)
    materia: Mapped[str] = mapped_column(Text, nullable=False)
    anio: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id}, nombre='{self.nombre}', "
            f"apellido='{self.apellido}', anio={self.anio})>"
        )
