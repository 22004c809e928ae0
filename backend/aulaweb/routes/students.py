"""
Aula Web Backend — Student Route Handlers
===========================================

What:  GET /api/students (list) and POST /api/students (create).
How:   Routes stay thin: they pull the StudentStore from app.state through a
       dependency and hand the body to StudentService.

Status codes:
    GET  → 200 array, newest id first
    POST → 201 created record, 400 validation failure
    both → 500 {"error": <driver message>} on store failure
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Request

from aulaweb.schemas.student import ErrorResponse, StudentIn, StudentResponse
from aulaweb.services.student_service import student_service
from aulaweb.services.student_store import StudentStore

router = APIRouter(prefix="/api", tags=["Students"])


def get_store(request: Request) -> StudentStore:
    """FastAPI dependency: the single StudentStore built during startup."""
    return request.app.state.store


@router.get(
    "/students",
    response_model=List[StudentResponse],
    responses={
        200: {"description": "All students, newest first"},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="List students",
)
async def list_students(store: StudentStore = Depends(get_store)) -> List[StudentResponse]:
    return await student_service.list_students(store)


@router.post(
    "/students",
    status_code=201,
    response_model=StudentResponse,
    responses={
        201: {"description": "Student created", "model": StudentResponse},
        400: {"description": "Missing fields or non-numeric year", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Create a student",
    description=(
        "Requires nombre, apellido and materia (non-empty) and anio (present, "
        "parsed as a base-10 integer)."
    ),
)
async def create_student(
    payload: Optional[StudentIn] = Body(default=None),
    store: StudentStore = Depends(get_store),
) -> StudentResponse:
    # No body at all behaves like an empty object
    return await student_service.create_student(
        store, payload if payload is not None else StudentIn()
    )
