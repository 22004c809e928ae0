"""
Aula Web Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a default `settings` object.
Who:   Passed to create_app(); the store, the weather service and the SPA
       route all read their knobs from the same Settings instance.
When:  Loaded once at module import time; validated before app starts.

Environment contract:
    PORT              listen port (default 3000)
    OPENWEATHER_KEY   OpenWeatherMap API key; empty disables /weather
    DATA_DIR          directory holding students.db (created if absent)
    PUBLIC_DIR        static assets + SPA entry document
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development; only
    OPENWEATHER_KEY has to be provided for the weather proxy to work.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── OpenWeatherMap ────────────────────────────────────────────────────
    # What: API key for the "current weather by city name" endpoint
    # Required: only for GET /weather; the rest of the API works without it
    openweather_key: str = Field(
        default="",
        description="OpenWeatherMap API key used by the weather proxy",
    )
    openweather_url: str = Field(
        default="https://api.openweathermap.org/data/2.5/weather",
    )
    openweather_units: str = Field(default="metric")
    openweather_lang: str = Field(default="es")

    # Upper bound for a single upstream call, in seconds
    openweather_timeout: float = Field(default=10.0, gt=0, le=120)

    default_city: str = Field(default="Posadas")
    default_country: str = Field(default="AR")

    # ── Record Store ──────────────────────────────────────────────────────
    # What: Directory holding the SQLite file; created on startup if missing
    data_dir: str = Field(default="data")
    database_file: str = Field(default="students.db")

    # What: Explicit SQLAlchemy URL; when empty the aiosqlite URL for
    # DATA_DIR/students.db is used
    database_url: Optional[str] = Field(default=None)

    # ── Static / SPA ──────────────────────────────────────────────────────
    public_dir: str = Field(default="docs")
    index_file: str = Field(default="index.html")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated; "*" lets any origin call the API
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Derived paths ─────────────────────────────────────────────────────
    @property
    def database_path(self) -> Path:
        return Path(self.data_dir) / self.database_file

    @property
    def resolved_database_url(self) -> str:
        """The SQLAlchemy URL the store connects to."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.database_path.resolve()}"

    @property
    def public_path(self) -> Path:
        return Path(self.public_dir).resolve()

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # OPENWEATHER_KEY and openweather_key both work
        "extra": "ignore",
    }

    def validate_weather_config(self) -> None:
        """
        What:  Checks that the weather proxy has what it needs.
        When:  Called during app startup (lifespan).
        Why:   A missing key is not fatal; the server logs a warning and
               /weather answers 500 until the key is configured.
        """
        if not self.openweather_key:
            raise ValueError(
                "No OPENWEATHER_KEY found in environment or .env. "
                "The /weather endpoint will fail without it."
            )


settings = Settings()
