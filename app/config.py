"""Configuration utilities for the script workflow service."""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REJECTION_MESSAGE = "Invalid requirements: Your input is either unclear or too complex."


class AgentSettings(BaseSettings):
    """Settings definition with inline documentation for future maintainers."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "script-workflow-agent"
    cors_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # LLM backing the agent capabilities
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    llm_provider: Literal["openai", "anthropic"] = "openai"
    default_llm_model: str = "gpt-4o-mini"
    llm_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    llm_timeout_seconds: float = Field(default=20.0, gt=0)
    llm_max_retries: int = Field(default=2, ge=0, le=10)

    # Hard ceiling on a whole run; exceeding it is a failure, not a rejection.
    workflow_timeout_seconds: float = Field(default=30.0, gt=0)
    rejection_message: str = DEFAULT_REJECTION_MESSAGE


@lru_cache
def get_settings() -> AgentSettings:
    """Return cached AgentSettings to avoid repeated environment parsing."""

    return AgentSettings()
