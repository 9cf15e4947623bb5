r"""Service settings read from the environment and an optional ``.env``
file."""

from __future__ import annotations

__all__ = ["Settings"]

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from legacylens.analysis.client import DEFAULT_BASE_URL, DEFAULT_MODEL
from legacylens.core.config import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_JITTER_MS,
    DEFAULT_MAX_CHARS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_MS,
)
from legacylens.retry import RetryConfig


# Field names map to upper-case environment variables
# (e.g. openai_api_key <- OPENAI_API_KEY)
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    openai_api_key: SecretStr | None = None
    openai_model: str = DEFAULT_MODEL
    openai_base_url: str = DEFAULT_BASE_URL

    # Comma separated list of allowed browser origins
    cors_origins: str = "http://localhost:5173"
    host: str = "127.0.0.1"
    port: int = 8787
    log_level: str = "INFO"
    structured_logs: bool = False

    # Replaces the LLM client with a fixed-result analyzer
    use_mock_analyzer: bool = False

    max_payload_bytes: int = Field(default=DEFAULT_MAX_PAYLOAD_BYTES, gt=0)
    max_chars: int = Field(default=DEFAULT_MAX_CHARS, gt=0)

    retry_retries: int = Field(default=DEFAULT_RETRIES, ge=0)
    retry_base_delay_ms: int = Field(default=DEFAULT_BASE_DELAY_MS, ge=0)
    retry_max_delay_ms: int = Field(default=DEFAULT_MAX_DELAY_MS, ge=0)
    retry_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    retry_jitter_ms: int = Field(default=DEFAULT_JITTER_MS, ge=0)

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def retry_config(self) -> RetryConfig:
        """Build the retry configuration of the LLM call."""
        return RetryConfig(
            retries=self.retry_retries,
            base_delay_ms=self.retry_base_delay_ms,
            max_delay_ms=self.retry_max_delay_ms,
            timeout_ms=self.retry_timeout_ms,
            jitter_ms=self.retry_jitter_ms,
        )
