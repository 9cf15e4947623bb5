from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from legacylens.retry import RetryConfig
from legacylens.settings import Settings

if TYPE_CHECKING:
    from pathlib import Path


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENAI_API_KEY", "OPENAI_MODEL", "PORT", "USE_MOCK_ANALYZER", "RETRY_RETRIES"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o-mini"
    assert settings.openai_base_url == "https://api.openai.com/v1"
    assert settings.port == 8787
    assert settings.log_level == "INFO"
    assert not settings.use_mock_analyzer
    assert settings.max_payload_bytes == 5 * 1024 * 1024
    assert settings.max_chars == 200_000


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-env")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("USE_MOCK_ANALYZER", "true")
    monkeypatch.setenv("RETRY_RETRIES", "5")
    monkeypatch.setenv("RETRY_TIMEOUT_MS", "1500")

    settings = Settings(_env_file=None)
    assert settings.openai_api_key.get_secret_value() == "sk-env"
    assert settings.openai_model == "gpt-env"
    assert settings.port == 9000
    assert settings.use_mock_analyzer
    assert settings.retry_retries == 5
    assert settings.retry_timeout_ms == 1500


def test_settings_from_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("OPENAI_MODEL=gpt-dotenv\nUNRELATED=ignored\n", encoding="utf-8")
    assert Settings(_env_file=env_file).openai_model == "gpt-dotenv"


def test_settings_api_key_is_hidden() -> None:
    settings = Settings(_env_file=None, openai_api_key="sk-secret")
    assert "sk-secret" not in repr(settings)


def test_settings_cors_origin_list() -> None:
    settings = Settings(_env_file=None, cors_origins=" http://a.example.com ,http://b.example.com,, ")
    assert settings.cors_origin_list == ["http://a.example.com", "http://b.example.com"]


def test_settings_retry_config() -> None:
    settings = Settings(
        _env_file=None,
        retry_retries=1,
        retry_base_delay_ms=10,
        retry_max_delay_ms=30,
        retry_timeout_ms=150,
        retry_jitter_ms=0,
    )
    assert settings.retry_config() == RetryConfig(
        retries=1, base_delay_ms=10, max_delay_ms=30, timeout_ms=150, jitter_ms=0
    )


@pytest.mark.parametrize(
    "overrides",
    [{"retry_retries": -1}, {"retry_timeout_ms": 0}, {"max_payload_bytes": 0}, {"max_chars": 0}],
)
def test_settings_invalid_values(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
