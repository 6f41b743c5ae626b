from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "LuxeClean API"
    APP_ENV: str = "prod"
    SERVICE_NAME: str = "api"

    # --- Database ---
    DATABASE_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "luxeclean"

    ALLOWED_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
