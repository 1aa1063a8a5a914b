from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


AdvisorProvider = Literal["openai", "anthropic", "google", "local"]


class Settings(BaseSettings):
    app_name: str = "EcoWare"
    app_version: str = "0.1.0"
    environment: str = "dev"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://frontend:5173"]

    simulation_interval_seconds: float = 10.0
    simulation_window_minutes: int = 10

    advisor_provider: AdvisorProvider = "google"
    advisor_max_tokens: int = 500
    advisor_temperature: float = 0.7
    advisor_timeout_seconds: float = 30.0

    openai_api_key: str = Field(
        default="your-openai-api-key-here",
        validation_alias=AliasChoices("OPENAI_API_KEY", "ECOWARE_OPENAI_API_KEY", "openai_api_key"),
    )
    anthropic_api_key: str = Field(
        default="your-anthropic-api-key-here",
        validation_alias=AliasChoices("ANTHROPIC_API_KEY", "ECOWARE_ANTHROPIC_API_KEY", "anthropic_api_key"),
    )
    google_api_key: str = Field(
        default="your-gemini-api-key-here",
        validation_alias=AliasChoices("GOOGLE_API_KEY", "ECOWARE_GOOGLE_API_KEY", "google_api_key"),
    )

    openai_endpoint: str = "https://api.openai.com/v1/chat/completions"
    anthropic_endpoint: str = "https://api.anthropic.com/v1/messages"
    google_endpoint: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
    )

    openai_model: str = "gpt-3.5-turbo"
    anthropic_model: str = "claude-3-sonnet-20240229"
    google_model: str = "gemini-2.0-flash"

    model_config = SettingsConfigDict(
        env_prefix="ECOWARE_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    def api_key_for(self, provider: str) -> str | None:
        return getattr(self, f"{provider}_api_key", None)

    def endpoint_for(self, provider: str) -> str | None:
        return getattr(self, f"{provider}_endpoint", None)

    def model_for(self, provider: str) -> str | None:
        return getattr(self, f"{provider}_model", None)


settings = Settings()
