"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "BrightLight Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite:///./brightlight.db"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "brightlight"
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_model: str = "gpt-3.5-turbo"
    openai_timeout_seconds: float = 60.0
    completion_max_retries: int = 3
    completion_retry_delay_seconds: float = 1.0
    completion_cache_enabled: bool = False
    plan_chunk_size: int = 14
    huggingface_api_key: str | None = None
    emotion_model_url: str = "https://api-inference.huggingface.co/models/SamLowe/roberta-base-go_emotions"
    emotion_max_retries: int = 3
    emotion_retry_delay_seconds: float = 20.0
    local_cache_path: str = ".cache/brightlight_local.json"
    local_cache_max_age_hours: int = 24 * 14


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
