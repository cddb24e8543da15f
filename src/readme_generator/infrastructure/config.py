"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file).

    Credentials are deliberately absent: every request brings its own LLM
    key and optional GitHub token.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_api_url: str = "https://api.github.com"
    user_agent: str = "readme-generator"
    max_files: int = 20
    max_file_size_bytes: int = 20_000

    llm_timeout_seconds: float = 60.0
    max_stream_bytes: int = 512 * 1024
    openai_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o"
    gemini_url_template: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    )
    gemini_model: str = "gemini-2.5-flash"
    openrouter_url: str = "https://openrouter.ai/api/v1/chat/completions"
    openrouter_model: str = "anthropic/claude-3.5-sonnet"
    openrouter_referer: str = "https://github-readme-generator.com"

    cors_allow_origins: list[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
