"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_ledger.domain.goals import DailyGoals

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

OCR_PROVIDERS = {"openai", "ocr_space"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    log_level: str = "INFO"
    ocr_provider: str = "openai"
    ocr_language: str = "eng"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    ocr_space_api_key: str | None = None
    ocr_space_base_url: str = "https://api.ocr.space/parse/image"
    ledger_update_attempts: int = 3
    goal_calories: float = 2000.0
    goal_protein_g: float = 150.0
    goal_carbs_g: float = 225.0
    goal_fat_g: float = 75.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def daily_goals(settings: Settings) -> DailyGoals:
    """Build daily goals from settings."""
    return DailyGoals(
        calories=settings.goal_calories,
        protein_g=settings.goal_protein_g,
        carbs_g=settings.goal_carbs_g,
        fat_g=settings.goal_fat_g,
    )


def parse_ocr_provider(raw: str | None) -> str:
    """Normalize the configured OCR provider name."""
    cleaned = (raw or "openai").strip().lower().replace("-", "_")
    if cleaned not in OCR_PROVIDERS:
        raise ValueError(f"Unknown OCR provider: {raw!r}")
    return cleaned
