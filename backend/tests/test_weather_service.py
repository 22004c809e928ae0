"""
Aula Web Backend — Weather Service Unit Tests (Mocked)
========================================================

What:  Tests for WeatherService with OpenWeatherMap replaced by
       httpx.MockTransport.
Why:   Tests must not make real API calls (needs a key and the network).

What we test:
    ✅ Payload reshaping, including missing nested data
    ✅ Query string: "city,country" encoded, metric units, Spanish text
    ✅ Missing key → ConfigurationError with zero outbound calls
    ✅ Non-2xx → UpstreamError carrying status and raw body
    ✅ Network / JSON failures → FetchError
"""

import httpx
import pytest

from aulaweb.config import Settings
from aulaweb.exceptions import ConfigurationError, FetchError, UpstreamError
from aulaweb.services.weather_service import WeatherService, reshape_weather

from conftest import UpstreamStub, sample_weather_payload


def _service(upstream: UpstreamStub, key: str = "test-key-not-real") -> WeatherService:
    settings = Settings(_env_file=None, openweather_key=key)
    client = httpx.AsyncClient(transport=upstream.transport)
    return WeatherService(settings, client=client)


class TestReshapeWeather:
    """reshape_weather picks a fixed subset of fields."""

    def test_full_payload(self):
        assert reshape_weather(sample_weather_payload()) == {
            "city": "Posadas",
            "country": "AR",
            "temp": 27.5,
            "feels_like": 29.1,
            "humidity": 65,
            "weather": "cielo claro",
            "icon": "01d",
        }

    def test_missing_nested_data_is_omitted(self):
        """No sys / weather blocks → no country, weather or icon keys."""
        result = reshape_weather({"name": "Posadas", "main": {"temp": 20.0}})
        assert result == {"city": "Posadas", "temp": 20.0}

    def test_values_are_copied_unchanged(self):
        result = reshape_weather({"name": 123, "main": {"temp": "27.5", "humidity": None}})
        assert result == {"city": 123, "temp": "27.5", "humidity": None}

    def test_empty_weather_list(self):
        payload = sample_weather_payload()
        payload["weather"] = []
        result = reshape_weather(payload)
        assert "weather" not in result
        assert "icon" not in result
        assert result["country"] == "AR"


class TestWeatherServiceRequests:
    """What goes over the wire."""

    def test_build_url_encodes_comma(self):
        service = _service(UpstreamStub())
        url = service.build_url("San José", "AR")
        assert "q=San%20Jos%C3%A9%2CAR" in url
        assert "units=metric" in url
        assert "lang=es" in url
        assert "appid=test-key-not-real" in url

    @pytest.mark.asyncio
    async def test_success_reshapes_payload(self):
        upstream = UpstreamStub()
        service = _service(upstream)

        result = await service.get_current("Posadas", "AR")

        assert result["city"] == "Posadas"
        assert result["weather"] == "cielo claro"
        assert len(upstream.calls) == 1
        params = upstream.calls[0].url.params
        assert params["q"] == "Posadas,AR"
        assert params["units"] == "metric"
        assert params["lang"] == "es"
        await service.aclose()

    @pytest.mark.asyncio
    async def test_defaults_when_city_and_country_empty(self):
        upstream = UpstreamStub()
        service = _service(upstream)

        await service.get_current("", None)

        assert upstream.calls[0].url.params["q"] == "Posadas,AR"
        await service.aclose()


class TestWeatherServiceFailures:
    """Each failure maps to its own exception type."""

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_call(self):
        upstream = UpstreamStub()
        service = _service(upstream, key="")

        with pytest.raises(ConfigurationError) as excinfo:
            await service.get_current("Posadas", "AR")

        assert excinfo.value.message == "No API key configured on server"
        assert upstream.calls == []
        await service.aclose()

    @pytest.mark.asyncio
    async def test_non_2xx_is_passed_through(self):
        upstream = UpstreamStub()
        body = '{"cod":"404","message":"city not found"}'
        upstream.responder = lambda request: httpx.Response(
            404, text=body, headers={"content-type": "application/json; charset=utf-8"}
        )
        service = _service(upstream)

        with pytest.raises(UpstreamError) as excinfo:
            await service.get_current("Atlantis", "XX")

        assert excinfo.value.status_code == 404
        assert excinfo.value.body == body.encode()
        assert excinfo.value.content_type.startswith("application/json")
        await service.aclose()

    @pytest.mark.asyncio
    async def test_non_2xx_body_is_kept_as_bytes(self):
        """A non-UTF-8 body is carried undecoded."""
        upstream = UpstreamStub()
        upstream.responder = lambda request: httpx.Response(
            401,
            content=b"ca\xf1\xf3n",
            headers={"content-type": "text/plain; charset=iso-8859-1"},
        )
        service = _service(upstream)

        with pytest.raises(UpstreamError) as excinfo:
            await service.get_current("Posadas", "AR")

        assert excinfo.value.body == b"ca\xf1\xf3n"
        await service.aclose()

    @pytest.mark.asyncio
    async def test_network_error_is_fetch_error(self):
        upstream = UpstreamStub()

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream.responder = refuse
        service = _service(upstream)

        with pytest.raises(FetchError) as excinfo:
            await service.get_current("Posadas", "AR")

        assert excinfo.value.message == "Error fetching weather"
        assert len(upstream.calls) == 1
        await service.aclose()

    @pytest.mark.asyncio
    async def test_timeout_is_fetch_error(self):
        upstream = UpstreamStub()

        def hang(request):
            raise httpx.ReadTimeout("timed out", request=request)

        upstream.responder = hang
        service = _service(upstream)

        with pytest.raises(FetchError):
            await service.get_current("Posadas", "AR")
        await service.aclose()

    @pytest.mark.asyncio
    async def test_invalid_json_is_fetch_error(self):
        upstream = UpstreamStub()
        upstream.responder = lambda request: httpx.Response(200, text="<html>oops</html>")
        service = _service(upstream)

        with pytest.raises(FetchError):
            await service.get_current("Posadas", "AR")
        await service.aclose()
