"""Configuration for the dynamic UI agent using environment variables."""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment Variables:
        LLM_API_KEY: API key for the LLM provider (required for generation)
        LLM_BASE_URL: Base URL for the LLM API (default: OpenAI)
        LLM_MODEL: Model name to use (default: gpt-4o-mini)
        LLM_TEMPERATURE: Sampling temperature (default: 0.3)
        DYNUI_LOG_LEVEL: Logging level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM Configuration
    llm_api_key: str = Field(
        default="",
        validation_alias="LLM_API_KEY",
        description="API key for the LLM provider",
    )
    llm_base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias="LLM_BASE_URL",
        description="Base URL for the LLM API (OpenAI or compatible)",
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="LLM_MODEL",
        description="Model name to use",
    )
    llm_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        validation_alias="LLM_TEMPERATURE",
        description="Sampling temperature (lower favors schema compliance)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        validation_alias="DYNUI_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        return getattr(logging, self.log_level.upper(), logging.INFO)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_llm_client(async_client: bool = True):
    """Get configured OpenAI client for LLM access.

    Args:
        async_client: Whether to return an AsyncOpenAI client

    Returns:
        OpenAI or AsyncOpenAI client configured for the current provider

    Raises:
        ConfigurationError: If LLM_API_KEY is not set
    """
    from openai import AsyncOpenAI, OpenAI

    settings = get_settings()
    if not settings.llm_api_key:
        raise ConfigurationError(
            "LLM_API_KEY environment variable is required. "
            "Set it to your API key for OpenAI or a compatible provider."
        )

    client_cls = AsyncOpenAI if async_client else OpenAI
    return client_cls(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
    )
