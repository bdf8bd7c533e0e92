"""Application configuration using Pydantic Settings.

Environment variables are loaded with the LYNQ_INSIGHTS_ prefix. Settings are
passed explicitly into pipeline and client factories, so a missing backend
credential is an ordinary, constructible state rather than an ambient global.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from lynq_insights.core.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOG_LEVEL,
    ServicePort,
    Timeouts,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service configuration
    service_name: str = "lynq-insights"
    port: int = ServicePort.INSIGHTS_SERVICE.value
    environment: str = Field(default=DEFAULT_ENVIRONMENT, description="Runtime environment")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")

    # Generation backend (OpenAI-compatible chat completions)
    openai_api_key: SecretStr | None = Field(
        default=None,
        description="Credential for the completion backend",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat completions API",
    )
    fast_model: str = Field(
        default="gpt-4o-mini",
        description="Model used by the validator, trend and recommendation stages",
    )
    summary_model: str = Field(
        default="gpt-4o",
        description="Model used by the summarizer stage",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)

    # Pipeline
    pipeline_mode: Literal["multi_stage", "single_stage"] = Field(
        default="multi_stage",
        description="single_stage is the legacy one-agent mode",
    )

    # Request timeouts
    llm_timeout_seconds: float = Field(default=Timeouts.HTTP_COMPLETION, gt=0)
    pipeline_timeout_seconds: float = Field(default=Timeouts.PIPELINE_DEFAULT, gt=0)

    # Remote insights service (transport adapter)
    insights_service_url: str = Field(
        default="http://localhost:8090",
        description="Base URL of a remote insights service",
    )
    insights_timeout_seconds: float = Field(default=Timeouts.HTTP_INSIGHTS, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="LYNQ_INSIGHTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def backend_configured(self) -> bool:
        """True when a non-blank backend credential is present."""
        if self.openai_api_key is None:
            return False
        return bool(self.openai_api_key.get_secret_value().strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings singleton
    """
    return Settings()
