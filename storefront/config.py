from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    draft_database_url: str

    # Fixtures
    seeds_data_glob: str = "seed/data/*.yml"

    # Assets
    asset_cache_dir: str = "tmp"
    asset_timeout_seconds: float = 30.0

    # Generation
    user_count: int = 500
    order_user_limit: int = 480
    faker_locale: str = "en_US"
    faker_seed: int = 42
    jitter_seed: int | None = None

    # App
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
