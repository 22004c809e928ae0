"""
Aula Web Backend — OpenWeatherMap Proxy Service
=================================================

What:  Looks up current weather for "city,country" and reshapes the payload.
Why:   The SPA never sees the API key; it calls GET /weather on this server.
How:   One GET per call to the provider's "current weather by city name"
       endpoint (metric units, Spanish descriptions) through a shared
       httpx.AsyncClient. No caching and no retries.
Who:   Built once at startup and kept on app.state; used by routes/weather.py.

Failure mapping:
    key missing        → ConfigurationError (no network call is made)
    non-2xx upstream   → UpstreamError (status + raw body passed through)
    network/JSON error → FetchError
"""

import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from aulaweb.config import Settings
from aulaweb.exceptions import ConfigurationError, FetchError, UpstreamError

logger = logging.getLogger(__name__)


def _first(items: Any) -> Dict[str, Any]:
    """weather[0] when the provider sent a non-empty list, else {}."""
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def reshape_weather(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract the normalized fields from a provider payload.

    Keys whose source is missing are left out of the result entirely, so
    a payload without `sys` yields no `country` key rather than an error.
    """
    main = _mapping(data.get("main"))
    sys_info = _mapping(data.get("sys"))
    condition = _first(data.get("weather"))

    # (output field, source object, source key)
    fields = (
        ("city", data, "name"),
        ("country", sys_info, "country"),
        ("temp", main, "temp"),
        ("feels_like", main, "feels_like"),
        ("humidity", main, "humidity"),
        ("weather", condition, "description"),
        ("icon", condition, "icon"),
    )
    return {field: source[key] for field, source, key in fields if key in source}


class WeatherService:
    """
    Thin client for the OpenWeatherMap current-weather endpoint.

    The httpx client is created by the application lifespan and closed on
    shutdown; tests pass a client backed by httpx.MockTransport.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.client = client or httpx.AsyncClient(timeout=settings.openweather_timeout)

    def build_url(self, city: str, country: str) -> str:
        """
        Provider URL for one lookup.

        "city,country" is percent-encoded with every reserved character
        escaped, so the comma travels as %2C.
        """
        q = quote(f"{city},{country}", safe="")
        return (
            f"{self.settings.openweather_url}?q={q}"
            f"&appid={quote(self.settings.openweather_key, safe='')}"
            f"&units={self.settings.openweather_units}"
            f"&lang={self.settings.openweather_lang}"
        )

    async def get_current(
        self, city: Optional[str] = None, country: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch and reshape the current weather for a city.

        Args:
            city: City name; empty or None falls back to DEFAULT_CITY.
            country: Country code; empty or None falls back to DEFAULT_COUNTRY.

        Returns:
            Dict with any of city, country, temp, feels_like, humidity,
            weather, icon.

        Raises:
            ConfigurationError: OPENWEATHER_KEY is not configured.
            UpstreamError: Provider answered with a non-2xx status.
            FetchError: Network failure, timeout, or unparseable body.
        """
        if not self.settings.openweather_key:
            raise ConfigurationError()

        city = city or self.settings.default_city
        country = country or self.settings.default_country
        url = self.build_url(city, country)

        start_time = time.perf_counter()
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            logger.error("Weather fetch error for %s,%s: %s", city, country, e)
            raise FetchError(context={"city": city, "country": country}) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.is_success:
            logger.warning(
                "Weather provider answered %d for %s,%s in %.0fms",
                response.status_code,
                city,
                country,
                duration_ms,
            )
            raise UpstreamError(
                status_code=response.status_code,
                body=response.content,
                content_type=response.headers.get("content-type"),
                context={"city": city, "country": country},
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Weather payload for %s,%s is not JSON: %s", city, country, e)
            raise FetchError(context={"city": city, "country": country}) from e

        if not isinstance(data, dict):
            logger.error("Weather payload for %s,%s is not an object", city, country)
            raise FetchError(context={"city": city, "country": country})

        logger.info("Weather for %s,%s fetched in %.0fms", city, country, duration_ms)
        return reshape_weather(data)

    async def aclose(self) -> None:
        await self.client.aclose()
