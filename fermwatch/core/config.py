from functools import lru_cache
from typing import Annotated

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "FermWatch"
    environment: str = "dev"
    rapt_email: str = ""
    rapt_api_secret: SecretStr = SecretStr("")
    rapt_client_id: str = "rapt-user"
    rapt_auth_url: str = "https://id.rapt.io/connect/token"
    rapt_api_url: str = "https://api.rapt.io/api"
    manual_original_gravity: float | None = None
    telemetry_lookback_hours: int = Field(default=24, ge=1)
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    token_expiry_margin_seconds: float = Field(default=30.0, ge=0)
    temp_danger_min: float = 18.0
    temp_warning_min: float = 20.0
    temp_warning_max: float = 26.0
    temp_danger_max: float = 28.0
    cors_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_prefix="FERMWATCH_", env_file=".env", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str] | None) -> list[str]:
        if value is None or value == "":
            return []
        if isinstance(value, list):
            return value
        return [item.strip() for item in value.split(",") if item.strip()]

    @field_validator("manual_original_gravity", mode="before")
    @classmethod
    def _blank_manual_og(cls, value: str | float | None) -> str | float | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
