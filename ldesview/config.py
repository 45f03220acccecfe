from pydantic import AnyHttpUrl, AnyUrl, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    # Public origin used in view addresses; falls back to the request base URL
    BASE_URL: AnyHttpUrl | None = None
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"
    # Storage adapter selection: "memory" or "redis"
    STORAGE_ADAPTER: Literal["memory", "redis"] = "memory"
    REDIS_URL: AnyUrl | None = None
    REDIS_KEY_PREFIX: str = "ldes"
    REDIS_BATCH_SIZE: int = 100
    # Pagination
    PAGE_SOFT_LIMIT: int = 250
    PAGE_HARD_LIMIT: int = 2000
    # JSON fixture loaded into the memory adapter at startup
    SEED_FILE: str | None = None

    @model_validator(mode="after")
    def check_page_limits(self) -> "Settings":
        if self.PAGE_SOFT_LIMIT < 1:
            raise ValueError("PAGE_SOFT_LIMIT must be at least 1")
        if self.PAGE_HARD_LIMIT <= self.PAGE_SOFT_LIMIT:
            raise ValueError("PAGE_HARD_LIMIT must be greater than PAGE_SOFT_LIMIT")
        return self

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
