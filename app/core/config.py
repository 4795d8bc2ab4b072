"""Core application configuration and settings.

Handles environment variables, the roster data location, and application settings.
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings


# Load environment variables
ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT / ".env", override=True)
load_dotenv(override=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Roster data
    data_path: str = Field(
        default_factory=lambda: (
            os.getenv("DATA_PATH")
            or os.getenv("STUDENTS_FILE")
            or str(ROOT / "data" / "students_with_personas.json")
        ),
        alias="DATA_PATH"
    )

    # Application Settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Dashboard sessions (in memory only)
    session_ttl_minutes: int = Field(default=60, alias="SESSION_TTL_MINUTES")

    # API Settings
    api_prefix: str = Field(default="", alias="API_PREFIX")
    api_base: str = Field(default="http://127.0.0.1:8000", alias="API_BASE")
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:8501",
            "http://127.0.0.1:8501"
        ],
        alias="CORS_ORIGINS"
    )

    class Config:
        case_sensitive = False
        env_file = ".env"
        populate_by_name = True

    def validate_required_settings(self):
        """Validate that required settings are present."""
        if not self.data_path:
            raise ValueError(
                "DATA_PATH not set. Define DATA_PATH in .env "
                "(path to students_with_personas.json)."
            )
        if self.environment == "production" and not Path(self.data_path).exists():
            raise ValueError(
                f"DATA_PATH points to a missing file: {self.data_path}"
            )


# Global settings instance
settings = Settings()


def get_data_path(override: Optional[str] = None) -> Path:
    """Resolve the roster file, relative paths taken from the project root."""
    path = Path(override or settings.data_path)
    return path if path.is_absolute() else ROOT / path


# Validate settings on module import (only in non-test environments)
if settings.environment != "test":
    try:
        settings.validate_required_settings()
    except ValueError as e:
        print(f"Configuration Error: {e}")
        # Don't raise in development to allow partial setup
        if settings.environment == "production":
            raise
