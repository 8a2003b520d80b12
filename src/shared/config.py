"""Configuration management for Year in Sport."""

import logging
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def find_env_file() -> Path | None:
    """Find .env file at git root (project root)."""
    # Search up for git root and use .env there
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / ".git").exists():
            env_file = parent / ".env"
            if env_file.exists():
                return env_file
            break
    # Fallback to current directory
    local_env = Path.cwd() / ".env"
    if local_env.exists():
        return local_env
    return None


def is_running_in_lambda() -> bool:
    """Check if code is running in AWS Lambda environment."""
    return "AWS_LAMBDA_FUNCTION_NAME" in os.environ


# Find env file once at module load
_env_file = find_env_file()


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    In Lambda they come from the function environment; locally from the
    .env file at the project root.
    """

    model_config = SettingsConfigDict(
        env_file=_env_file,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Strava OAuth Configuration
    strava_client_id: str = Field(
        default="",
        description="Strava application client ID",
    )
    strava_client_secret: str = Field(
        default="",
        description="Strava application client secret",
    )
    strava_redirect_uri: str = Field(
        default="http://localhost:9876/callback",
        description="OAuth redirect URI for authorization code flow",
    )
    strava_token_secret_name: str = Field(
        default="yearinsport/strava-tokens",
        description="Secrets Manager secret holding Strava tokens (Lambda)",
    )
    tokens_file: Path = Field(
        default=Path.home() / ".config" / "yis" / "tokens.json",
        description="Local Strava token file (CLI)",
    )

    # Strava API fetching
    activities_page_size: int = Field(
        default=200,
        description="Activities requested per page (Strava max 200)",
        ge=1,
        le=200,
    )
    page_delay_seconds: float = Field(
        default=0.1,
        description="Pause between activity pages to respect rate limits",
        ge=0,
    )

    # Stats caching
    stats_cache_ttl_seconds: int = Field(
        default=3600,
        description="How long computed year stats are cached",
        ge=0,
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-2",
        description="AWS region for services",
    )

    # Application Settings
    environment: str = Field(
        default="dev",
        description="Environment: dev, staging, prod",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern).

    Returns:
        Settings instance with all configuration
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        if is_running_in_lambda():
            logger.info(f"Loaded settings for Lambda environment '{_settings.environment}'")
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the next get_settings() re-reads them."""
    global _settings
    _settings = None
