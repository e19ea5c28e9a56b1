"""
Example API — Application Configuration
=========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the routes and the fixture harness.
When:  Loaded once at module import time; tests build their own instances.
"""

from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults that make the API behave like the reference
    service: no auth, ids drawn from [2, 100], fixtures under tests/fixtures.
    """

    # ── Authentication ────────────────────────────────────────────────────
    # What: Shared token expected in the X-Auth-Token header of GET requests
    # None disables the check entirely (later API revision has no auth)
    auth_token: Optional[str] = Field(
        default=None,
        description="Token required in X-Auth-Token for GET /api/examples/{id}",
    )

    # ── Id Generation ─────────────────────────────────────────────────────
    # What: Inclusive bounds for ids handed out by POST /api/examples
    # Id 1 is reserved for the built-in "Test" example
    id_min: int = Field(default=2, ge=1)
    id_max: int = Field(default=100, ge=1)

    # What: Optional seed for the random id generator (reproducible runs)
    id_seed: Optional[int] = Field(default=None)

    # ── Fixture Harness ───────────────────────────────────────────────────
    # What: Directory scanned recursively for *.md request/response fixtures
    fixtures_dir: str = Field(default="backend/tests/fixtures")

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

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

    @model_validator(mode="after")
    def validate_id_range(self) -> "Settings":
        """The id range must not be empty."""
        if self.id_min > self.id_max:
            raise ValueError(
                f"id_min ({self.id_min}) must not be greater than id_max ({self.id_max})"
            )
        return self

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # AUTH_TOKEN and auth_token both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
