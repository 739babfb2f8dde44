"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    api_token: str
    storage_bucket: str = "images"
    image_fetch_timeout_seconds: float = 20.0
    log_level: str = "INFO"
    meal_points: int = 50
    workout_points: int = 50
    body_check_points: int = 75
    body_check_challenge_points: int = 100
    roast_points: int = 50
    roast_challenge_points: int = 100
    shame_challenge_points: int = 100
    shamed_post_points: int = -50
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_api_tokens(raw: str | None) -> set[str]:
    """Parse a comma-separated list of accepted API tokens."""
    if raw is None:
        return set()
    return {chunk.strip() for chunk in raw.split(",") if chunk.strip()}
