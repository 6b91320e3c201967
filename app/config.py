"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.
"""


import os

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.logger import setup_logger

load_dotenv()


logger = setup_logger("core_config")

DEFAULT_SECRET_KEY = "your-secret-key-change-this-in-production"


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        # Allow override from environment variables
        env_prefix="",
    )

    # ===== Database Configuration =====
    app_database_url: str | None = Field(
        default=None,
        alias="DAILY_TASKS_DATABASE_URL",
        description="Application database URL (postgresql or sqlite+aiosqlite)",
    )

    daily_tasks_schema: str = Field(
        default="daily_tasks",
        alias="DAILY_TASKS_SCHEMA",
        description="PostgreSQL schema name, ignored for SQLite",
    )

    # ===== Authentication Configuration =====
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        alias="SECRET_KEY",
        description="Secret used to sign bearer tokens",
    )

    access_token_expire_minutes: int = Field(
        default=1440,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
        description="Bearer token lifetime in minutes (default 24 hours)",
    )

    # ===== Calendar Configuration =====
    timezone: str = Field(
        default="UTC",
        alias="APP_TIMEZONE",
        description="IANA timezone used to resolve 'today' and 'yesterday'",
    )

    # ===== Server Configuration =====
    api_prefix: str = Field(
        default="/api/v1", alias="API_PREFIX", description="Versioned API prefix"
    )

    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=8000, alias="SERVER_PORT", description="Server port number"
    )

    server_workers: int = Field(
        default=1, alias="SERVER_WORKERS", description="Number of uvicorn workers"
    )

    # ===== CORS Configuration =====
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",  # Vite dev server default port
            "http://localhost:3000",
            "http://127.0.0.1:5173",
        ],
        alias="CORS_ALLOW_ORIGINS",
        description="CORS allowed origins",
    )

    cors_allow_credentials: bool = Field(
        default=True,
        alias="CORS_ALLOW_CREDENTIALS",
        description="Whether to allow credentials in CORS requests",
    )

    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_METHODS",
        description="CORS allowed methods",
    )

    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_HEADERS",
        description="CORS allowed headers",
    )

    # User-facing hint for database connection errors
    db_unavailable_hint: str = os.getenv(
        "DB_UNAVAILABLE_HINT",
        "Database connection failed. The server may be offline or network connectivity is down.",
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings and log warnings for missing critical configurations."""

        if not self.app_database_url:
            logger.warning("DAILY_TASKS_DATABASE_URL environment variable not set.")

        if self.secret_key == DEFAULT_SECRET_KEY:
            logger.warning(
                "SECRET_KEY is using the built-in default. Set it in production."
            )

        logger.debug(f"Using timezone: {self.timezone}")

        return self

    @property
    def is_sqlite(self) -> bool:
        return bool(self.app_database_url) and self.app_database_url.startswith(
            "sqlite"
        )

    @property
    def schema_name(self) -> str | None:
        # SQLite has no schemas; tables live in the main database
        if self.is_sqlite:
            return None
        return self.daily_tasks_schema


# Global settings instance
settings = Settings()

SCHEMA_NAME = settings.schema_name
