"""
Aula Web Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own temporary data directory (fresh SQLite file)
       and public directory (fake SPA build). The weather provider is never
       contacted: the app's httpx client runs on an httpx.MockTransport whose
       answers each test can change.

Fixture Hierarchy:
    test_settings   → Settings pointing at tmp dirs, fake API key
    upstream        → recorded calls + configurable stub for OpenWeatherMap
    test_app        → FastAPI app with its lifespan entered (store ready)
    test_client     → HTTPX AsyncClient talking to test_app via ASGITransport
    store           → standalone StudentStore on a tmp SQLite file
"""

import os
from typing import Any, AsyncGenerator, Callable, Dict, List

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the developer's real .env / key out of the test run
os.environ["OPENWEATHER_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from aulaweb.config import Settings  # noqa: E402
from aulaweb.main import create_app  # noqa: E402
from aulaweb.services.student_store import StudentStore  # noqa: E402

INDEX_HTML = "<!doctype html><html><head><title>Aula Web test</title></head><body></body></html>"


def sample_weather_payload() -> Dict[str, Any]:
    """A trimmed OpenWeatherMap current-weather document."""
    return {
        "coord": {"lon": -55.8961, "lat": -27.3671},
        "weather": [{"id": 800, "main": "Clear", "description": "cielo claro", "icon": "01d"}],
        "main": {
            "temp": 27.5,
            "feels_like": 29.1,
            "temp_min": 26.0,
            "temp_max": 28.9,
            "pressure": 1012,
            "humidity": 65,
        },
        "sys": {"country": "AR", "sunrise": 1700000000, "sunset": 1700050000},
        "name": "Posadas",
        "cod": 200,
    }


class UpstreamStub:
    """
    Stand-in for OpenWeatherMap behind httpx.MockTransport.

    Attributes:
        calls: Every httpx.Request that reached the transport.
        responder: Callable producing the response; tests swap it out.
    """

    def __init__(self):
        self.calls: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json=sample_weather_payload())
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def public_dir(tmp_path):
    """A fake SPA build: index.html plus one static asset."""
    docs = tmp_path / "docs"
    (docs / "assets").mkdir(parents=True)
    (docs / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (docs / "assets" / "app.js").write_text("console.log('aula');", encoding="utf-8")
    return docs


@pytest.fixture
def test_settings(tmp_path, public_dir) -> Settings:
    """Settings isolated from the environment and the developer's .env."""
    return Settings(
        _env_file=None,
        openweather_key="test-key-not-real",
        data_dir=str(tmp_path / "data"),
        public_dir=str(public_dir),
        log_level="WARNING",
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest_asyncio.fixture
async def test_app(test_settings, upstream):
    """
    App with its lifespan running, so app.state.store and
    app.state.weather_service exist exactly as in production.
    """
    app = create_app(test_settings, http_transport=upstream.transport)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def store(tmp_path) -> AsyncGenerator[StudentStore, None]:
    """A StudentStore on a fresh SQLite file, schema already created."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'store' / 'students.db'}"
    student_store = StudentStore(url)
    await student_store.init_schema()
    yield student_store
    await student_store.dispose()
