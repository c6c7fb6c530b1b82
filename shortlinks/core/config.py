from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "URL Shortener"

    # Storage
    DATABASE_URL: str = "sqlite:///./shortener.db"
    DB_BUSY_TIMEOUT: float = 5.0
    MAX_CREATE_ATTEMPTS: int = 5

    # Optional target cache; leave unset to run without Redis
    REDIS_URL: Optional[str] = None
    CACHE_TTL: int = 86400

    BASE_URL: str = "http://localhost:8080"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
