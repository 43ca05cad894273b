# timeblock/config.py

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Single project config. Reads environment variables.
    Pydantic v2 + pydantic-settings.
    """
    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # --- General ---
    ENVIRONMENT: str = Field("dev", description="Application environment (dev, test, prod)")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")

    # --- Database ---
    DATABASE_URL: str = Field(
        ...,
        description="Async database URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)",
    )

    # --- JWT ---
    JWT_SECRET_KEY: str = Field(..., description="Secret key for signing JWT tokens")
    JWT_ALGORITHM: str = Field("HS256", description="Algorithm for JWT signing")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24 * 7, description="JWT access token lifetime in minutes")

    # --- LLM ---
    LLM_PROVIDER: str = Field("stub", description="LLM provider to use ('stub', 'openai')")
    OPENAI_API_KEY: Optional[str] = Field(None, description="API key for the OpenAI chat-completions API")
    OPENAI_BASE_URL: str = Field("https://api.openai.com/v1", description="Base URL of the chat-completions API")
    OPENAI_MODEL: str = Field("gpt-4.1-2025-04-14", description="Chat model name")
    LLM_MAX_TOKENS: int = Field(1000, description="max_tokens sent with every completion request")
    LLM_TEMPERATURE: float = Field(0.7, description="Sampling temperature")
    LLM_TIMEOUT_SECONDS: float = Field(60.0, description="HTTP timeout for one completion request")

    # --- Calendar ---
    CALENDAR_PROVIDER: str = Field("noop", description="Calendar provider ('noop', 'google')")
    GOOGLE_CALENDAR_CREDENTIALS_JSON: Optional[str] = Field(
        None, description="Path to a Google service-account JSON key"
    )
    GOOGLE_CALENDAR_ID: str = Field("primary", description="Calendar that receives created events")
    DEFAULT_TIMEZONE: str = Field("UTC", description="IANA zone used when the caller sends none")

    # --- HTTP ---
    CORS_ALLOW_ORIGIN: str = Field("*", description="Value of Access-Control-Allow-Origin")

    @model_validator(mode="after")
    def check_provider_credentials(self) -> "Settings":
        self.LLM_PROVIDER = self.LLM_PROVIDER.lower()
        self.CALENDAR_PROVIDER = self.CALENDAR_PROVIDER.lower()
        if self.LLM_PROVIDER == "openai" and not self.OPENAI_API_KEY:
            raise ValueError("OPENAI_API_KEY must be set when LLM_PROVIDER=openai")
        if self.CALENDAR_PROVIDER == "google" and not self.GOOGLE_CALENDAR_CREDENTIALS_JSON:
            raise ValueError("GOOGLE_CALENDAR_CREDENTIALS_JSON must be set when CALENDAR_PROVIDER=google")
        return self


try:
    settings = Settings()
    log.info("Settings loaded successfully for ENVIRONMENT=%s", settings.ENVIRONMENT)
    log.debug(
        "Loaded settings: DB URL=%s..., LLM Provider=%s, Calendar Provider=%s",
        settings.DATABASE_URL[:25],
        settings.LLM_PROVIDER,
        settings.CALENDAR_PROVIDER,
    )
except Exception:
    log.exception("Failed to instantiate Settings.")
    raise
