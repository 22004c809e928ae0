"""
Aula Web Backend — Health Check Route
=======================================

What:  Liveness probe for Docker/load balancers.
Why:   Answers {"ok": true} as long as the process serves HTTP. It does not
       probe SQLite or OpenWeatherMap, so a missing API key or a locked
       database never marks the instance as down.
"""

from fastapi import APIRouter

from aulaweb.schemas.student import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service liveness check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(ok=True)
