from __future__ import annotations

from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_project_root = Path(__file__).resolve().parents[1]
load_dotenv(_project_root / ".env", override=False)


class Settings(BaseSettings):
    CAMPAIGN_API_BASE_URL: AnyHttpUrl
    CAMPAIGN_API_TOKEN: str | None = None
    CAMPAIGN_API_TIMEOUT_SECONDS: float = 20.0

    SEQUENCE_DEFAULT_GAP_DAYS: int = 3
    DEFAULT_SEND_TIMEZONE: str = "America/New_York"

    @field_validator("CAMPAIGN_API_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("CAMPAIGN_API_TIMEOUT_SECONDS must be positive")
        return value

    @field_validator("SEQUENCE_DEFAULT_GAP_DAYS")
    @classmethod
    def validate_default_gap(cls, value: int) -> int:
        if value < 1 or value > 30:
            raise ValueError("SEQUENCE_DEFAULT_GAP_DAYS must be between 1 and 30")
        return value

    @field_validator("DEFAULT_SEND_TIMEZONE")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        cleaned = value.strip()
        try:
            ZoneInfo(cleaned)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"DEFAULT_SEND_TIMEZONE '{value}' is not a known IANA timezone") from exc
        return cleaned

    @property
    def api_base_url(self) -> str:
        return str(self.CAMPAIGN_API_BASE_URL).rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
