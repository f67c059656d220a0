from __future__ import annotations

from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKDASH_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )
    alpha_vantage_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ALPHA_VANTAGE_API_KEY",
            "STOCKDASH_ALPHA_VANTAGE_API_KEY",
        ),
    )
    alpha_vantage_base_url: str = "https://www.alphavantage.co"
    yahoo_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "YH_FINANCE_API_KEY",
            "STOCKDASH_YAHOO_API_KEY",
        ),
    )
    yahoo_base_url: str = "https://yfapi.net"
    timeout_seconds: float = 10.0
    max_retries: int = 0
    retry_backoff_seconds: float = 0.5

    def api_keys(self) -> list[str]:
        return [key for key in (self.alpha_vantage_api_key, self.yahoo_api_key) if key]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKDASH_",
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    host: str = "0.0.0.0"
    port: int = Field(
        default=9000,
        validation_alias=AliasChoices("PORT", "STOCKDASH_PORT"),
    )
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    historical_range: str = "1y"
    historical_interval: str = "1d"

    providers: ProviderSettings = Field(default_factory=ProviderSettings)


settings = Settings()
