"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """A required credential or setting is missing."""

    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Completion service
    openai_api_key: SecretStr | None = None
    openai_base_url: str | None = "https://models.github.ai/inference"
    openai_model: str = "gpt-4o"
    citation_model: str = "gpt-4o"

    # Search service
    serpapi_api_key: SecretStr | None = None
    serpapi_base_url: str = "https://serpapi.com/search.json"
    search_hl: str = "en"
    search_gl: str = "us"

    # Documents
    max_document_chars: int = 12000

    # Sampling temperatures
    summary_temperature: float = 1.2
    followup_temperature: float = 1.2
    extraction_temperature: float = 0.7
    citation_temperature: float = 0.2

    # Citation filtering
    max_citation_statements: int = 10

    # Timeouts (seconds)
    completion_timeout_s: float = 60.0
    search_timeout_s: float = 15.0

    # HTTP
    cors_origins: list[str] = ["http://localhost:5173"]

    # Logging
    log_level: str = "INFO"

    @property
    def completion_configured(self) -> bool:
        """Whether the completion API key is present."""
        return bool(self.openai_api_key and self.openai_api_key.get_secret_value())

    @property
    def search_configured(self) -> bool:
        """Whether the search API key is present."""
        return bool(self.serpapi_api_key and self.serpapi_api_key.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
