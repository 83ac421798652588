"""Service settings for the HTTP driver, loaded from the environment."""
from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from ``GREENWAVE_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="GREENWAVE_", env_file=".env", extra="ignore")

    APP_NAME: str = "Green Wave Signal Simulation"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None # Set GREENWAVE_LOG_FILE to also log to a rotating file
    AUTO_START: bool = True
    HOST: str = "127.0.0.1"
    PORT: int = 8001
    CORS_ORIGINS: List[str] = ["*"]


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
