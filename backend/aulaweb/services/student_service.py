"""
Aula Web Backend — Student Service
====================================

What:  Validation and orchestration for the student endpoints.
Why:   Keeps the create rules out of the route handlers so they can be
       unit-tested without HTTP.
How:   validate_new_student() turns a raw StudentIn into a NewStudent or
       raises ValidationError; StudentService then talks to the store.

Create rules:
    1. nombre, apellido and materia must be truthy
    2. anio must be present in the body (null and 0 count as present)
    3. anio is read like parseInt(anio, 10): leading digits, optional sign
"""

import logging
import re
from typing import Any, List, Optional

from aulaweb.exceptions import ValidationError
from aulaweb.schemas.student import NewStudent, StudentIn, StudentResponse
from aulaweb.services.student_store import StudentStore

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Faltan campos obligatorios: nombre, apellido, materia y anio"
INVALID_YEAR_MESSAGE = "Año debe ser un número entero"

_LEADING_INT = re.compile(r"\s*([+-]?)0*([0-9]+)")

# SQLite INTEGER is a signed 64-bit value
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1
_MAX_DIGITS = len(str(SQLITE_INT_MAX))


def parse_year(value: Any) -> Optional[int]:
    """
    Parse a year the way a base-10 parseInt does.

    Leading whitespace and a sign are allowed, trailing characters are
    ignored ("2024abc" → 2024). Returns None when no digits lead the
    string form of the value ("abc", "", None, True) or when the number
    does not fit in a SQLite INTEGER.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if SQLITE_INT_MIN <= value <= SQLITE_INT_MAX else None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    sign, digits = match.groups()
    if len(digits) > _MAX_DIGITS:
        return None
    year = int(sign + digits)
    if not SQLITE_INT_MIN <= year <= SQLITE_INT_MAX:
        return None
    return year


def validate_new_student(payload: StudentIn) -> NewStudent:
    """
    Apply the create rules to a request body.

    Raises:
        ValidationError: A required field is missing or anio is not numeric.
    """
    if (
        not payload.nombre
        or not payload.apellido
        or not payload.materia
        or "anio" not in payload.model_fields_set
    ):
        raise ValidationError(
            message=MISSING_FIELDS_MESSAGE,
            context={"received": sorted(payload.model_fields_set)},
        )

    anio = parse_year(payload.anio)
    if anio is None:
        logger.debug("Rejected non-numeric anio: %r", payload.anio)
        raise ValidationError(message=INVALID_YEAR_MESSAGE, field="anio")

    return NewStudent(
        nombre=str(payload.nombre),
        apellido=str(payload.apellido),
        materia=str(payload.materia),
        anio=anio,
    )


class StudentService:
    """Stateless; receives the store on every call."""

    async def list_students(self, store: StudentStore) -> List[StudentResponse]:
        students = await store.list_all()
        return [StudentResponse.model_validate(s) for s in students]

    async def create_student(self, store: StudentStore, payload: StudentIn) -> StudentResponse:
        new_student = validate_new_student(payload)
        student = await store.insert(
            nombre=new_student.nombre,
            apellido=new_student.apellido,
            materia=new_student.materia,
            anio=new_student.anio,
        )
        return StudentResponse.model_validate(student)


student_service = StudentService()
