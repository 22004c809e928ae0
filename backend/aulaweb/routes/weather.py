"""
Aula Web Backend — Weather Proxy Route
========================================

What:  GET /weather?city=&country= → normalized current weather.
How:   Delegates to the WeatherService kept on app.state. Failures are
       raised as exceptions and formatted by the global handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from aulaweb.schemas.student import ErrorResponse, WeatherResponse
from aulaweb.services.weather_service import WeatherService

router = APIRouter(tags=["Weather"])


def get_weather_service(request: Request) -> WeatherService:
    """FastAPI dependency: the WeatherService built during startup."""
    return request.app.state.weather_service


@router.get(
    "/weather",
    response_model=WeatherResponse,
    response_model_exclude_unset=True,
    responses={
        200: {"description": "Current weather", "model": WeatherResponse},
        500: {"description": "No API key configured or fetch error", "model": ErrorResponse},
    },
    summary="Current weather for a city",
    description=(
        "Proxies OpenWeatherMap's current weather endpoint (metric units, Spanish "
        "descriptions). Non-2xx provider answers are passed through unchanged."
    ),
)
async def get_weather(
    city: Optional[str] = Query(default=None, description="City name (default Posadas)"),
    country: Optional[str] = Query(default=None, description="Country code (default AR)"),
    weather_service: WeatherService = Depends(get_weather_service),
) -> WeatherResponse:
    snapshot = await weather_service.get_current(city=city, country=country)
    return WeatherResponse(**snapshot)
