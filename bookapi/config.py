"""
Book API — Application Configuration
====================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the bootstrap (main.py) and passed explicitly to create_app().
When:  Loaded once at module import time.

Environment variables (case-insensitive):
    PORT, HOST, LOG_LEVEL, CORS_ORIGINS, API_TITLE, API_VERSION,
    API_DESCRIPTION, DOCS_PATH, GREETING, STRICT_API_SPEC
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development; the server
    starts with no environment at all.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
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

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of origins, "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── API Documentation ─────────────────────────────────────────────────
    api_title: str = Field(default="Book API")
    api_version: str = Field(default="1.0.0")
    api_description: str = Field(default="Book API documentation")

    # Mount point for the Swagger UI; the OpenAPI JSON lives underneath it
    docs_path: str = Field(default="/docs")

    @field_validator("docs_path")
    @classmethod
    def validate_docs_path(cls, v: str) -> str:
        """Docs path must be absolute and carry no trailing slash."""
        if not v.startswith("/") or (len(v) > 1 and v.endswith("/")) or v == "/":
            raise ValueError(
                f"Invalid docs_path '{v}'. Must start with '/' and not end with '/'"
            )
        return v

    @property
    def openapi_path(self) -> str:
        return f"{self.docs_path}/openapi.json"

    # When True, a mismatch between the declared API spec and the registered
    # routes aborts startup instead of being logged as a warning
    strict_api_spec: bool = Field(default=False)

    # ── Content ───────────────────────────────────────────────────────────
    greeting: str = Field(default="Book API server is up and running!")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance, the default configuration for create_app() and serve()
settings = Settings()
