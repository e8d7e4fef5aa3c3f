"""Application settings for backend runtime and tests."""

from __future__ import annotations

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

DEFAULT_LLM_SYSTEM_PROMPT = "You are a concise study assistant. Answer in Korean by default."


class Settings(BaseSettings):
    """Typed settings loaded from environment variables, `.env` or explicit kwargs."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    roomchat_app_env: str = "dev"
    roomchat_app_host: str = "0.0.0.0"
    roomchat_app_port: int = Field(default=4000, ge=1, le=65535)
    roomchat_cors_allow_origins: str = "*"
    roomchat_log_level: str = "INFO"

    openai_api_key: str = ""
    roomchat_llm_base_url: str = "https://api.openai.com/v1"
    roomchat_llm_model: str = Field(default="gpt-4o-mini", min_length=1)
    roomchat_llm_system_prompt: str = DEFAULT_LLM_SYSTEM_PROMPT
    roomchat_llm_temperature: float = Field(default=0.5, ge=0.0, le=2.0)
    roomchat_llm_max_tokens: int = Field(default=400, ge=1)
    roomchat_llm_timeout_seconds: float = Field(default=30.0, gt=0)

    @model_validator(mode="after")
    def validate_llm_base_url(self) -> "Settings":
        """Require an absolute http(s) upstream URL without a trailing slash."""
        if not self.roomchat_llm_base_url.startswith(("http://", "https://")):
            raise ValueError("ROOMCHAT_LLM_BASE_URL must start with http:// or https://")
        self.roomchat_llm_base_url = self.roomchat_llm_base_url.rstrip("/")
        return self

    @property
    def cors_allow_origins(self) -> list[str]:
        return [origin.strip() for origin in self.roomchat_cors_allow_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
