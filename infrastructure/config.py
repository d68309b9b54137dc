"""Client configuration, read from AIRHOTEL_* environment variables or .env"""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AIRHOTEL_", env_file=".env", extra="ignore")

    api_base_url: str = "http://localhost:8080"
    # Optional "NAME=VALUE" cookie seeded into the jar at startup
    session_cookie: str = ""
    session_cookie_name: str = "JSESSIONID"
    oauth_provider: str = "google"
    request_timeout: float = Field(default=15.0, gt=0)
    toast_duration: float = Field(default=3.5, gt=0)
    room_type_page_size: int = Field(default=4, ge=1)
    default_currency: str = "USD"
    log_level: str = "INFO"

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("default_currency")
    @classmethod
    def iso_currency(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency must be a 3-letter ISO code")
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
