"""Core application configuration and settings.

Handles environment variables, agent gateway access, and application settings.
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

    # Agent Gateway
    agent_gateway_url: str = Field(
        default_factory=lambda: (
            os.getenv("AGENT_GATEWAY_URL")
            or os.getenv("AI_AGENT_URL")
            or "http://127.0.0.1:3000/api/agent"
        ),
        alias="AGENT_GATEWAY_URL"
    )
    agent_api_key: Optional[str] = Field(default=None, alias="AGENT_API_KEY")
    agent_timeout_seconds: float = Field(default=120.0, alias="AGENT_TIMEOUT_SECONDS")

    # Agent identifiers (one per agent role)
    agent_id_academic_coordinator: str = Field(
        default="6988350dab8c2b0ff025872c", alias="AGENT_ID_ACADEMIC_COORDINATOR"
    )
    agent_id_lms_sync: str = Field(default="698834b829694629a3a3596e", alias="AGENT_ID_LMS_SYNC")
    agent_id_study_planner: str = Field(default="698834ceb662c978044a1588", alias="AGENT_ID_STUDY_PLANNER")
    agent_id_collaboration: str = Field(default="698834f2f92870f1ee0acc6a", alias="AGENT_ID_COLLABORATION")
    agent_id_smart_reminder: str = Field(default="69883529b662c978044a158f", alias="AGENT_ID_SMART_REMINDER")

    # Display
    display_timezone: str = Field(default="UTC", alias="DISPLAY_TIMEZONE")
    attendance_warning_threshold: float = Field(default=80.0, alias="ATTENDANCE_WARNING_THRESHOLD")

    # Application Settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # API Settings
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
        extra = "ignore"

    def validate_required_settings(self):
        """Validate that required settings are present."""
        if not self.agent_gateway_url:
            raise ValueError(
                "AGENT_GATEWAY_URL not set. Define AGENT_GATEWAY_URL in .env "
                "(e.g., https://agents.example.com/api/agent)."
            )
        if self.agent_timeout_seconds <= 0:
            raise ValueError("AGENT_TIMEOUT_SECONDS must be positive.")


# Global settings instance
settings = Settings()

# Module-level defaults for helpers that take them as arguments
DISPLAY_TIMEZONE = settings.display_timezone


# Validate settings on module import (only in non-test environments)
if settings.environment != "test":
    try:
        settings.validate_required_settings()
    except ValueError as e:
        print(f"Configuration Error: {e}")
        # Don't raise in development to allow partial setup
        if settings.environment == "production":
            raise
