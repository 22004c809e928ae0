"""
Aula Web Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract with the SPA frontend.
Why:   The request body is parsed into an explicit schema at the boundary,
       and responses are serialized from typed models.

Design Decision:
    StudentIn deliberately accepts any JSON value for each field. The
    create rules (truthy names, "present" year, parseInt-style year) are
    business rules that answer 400 with a Spanish message, so they live in
    student_service rather than in Pydantic validators, which would answer
    with FastAPI's generic error shape.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class StudentIn(BaseModel):
    """
    What:  Raw body of POST /api/students.
    How:   Every field is optional at this layer; `model_fields_set` tells
           an explicit `"anio": null` apart from a body without `anio`.
    """
    nombre: Any = Field(default=None, description="First name")
    apellido: Any = Field(default=None, description="Last name")
    materia: Any = Field(default=None, description="Subject")
    anio: Any = Field(default=None, description="Year, integer or numeric string")

    model_config = {"extra": "ignore"}


class NewStudent(BaseModel):
    """A create request that passed validation; ready for the store."""
    nombre: str
    apellido: str
    materia: str
    anio: int


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class StudentResponse(BaseModel):
    """
    What:  One persisted student row.
    Who:   Items of GET /api/students and the body of POST /api/students.
    """
    id: int = Field(description="Store-assigned identifier, strictly increasing")
    nombre: str
    apellido: str
    materia: str
    anio: int
    created_at: Optional[datetime] = Field(
        default=None,
        description="Insert timestamp (UTC)",
    )

    model_config = {"from_attributes": True}


class WeatherResponse(BaseModel):
    """
    What:  Normalized subset of an OpenWeatherMap current-weather payload.
    How:   Built with only the keys present upstream and serialized with
           exclude_unset, so missing nested data is omitted from the JSON.
           Fields are Any: values are copied from the provider as-is,
           never coerced.
    """
    city: Any = Field(default=None, description="City name (name)")
    country: Any = Field(default=None, description="Country code (sys.country)")
    temp: Any = Field(default=None, description="Temperature °C (main.temp)")
    feels_like: Any = Field(default=None, description="Feels-like °C")
    humidity: Any = Field(default=None, description="Relative humidity %")
    weather: Any = Field(default=None, description="Description in Spanish")
    icon: Any = Field(default=None, description="Provider icon identifier")


class HealthResponse(BaseModel):
    """Liveness probe body; does not reflect database or upstream state."""
    ok: bool = True


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every endpoint.
    Example:
        {"error": "Faltan campos obligatorios: nombre, apellido, materia y anio"}
    """
    error: str = Field(description="Human-readable error description")
