"""Application settings for the clip-suggestion service and CLI."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings read from environment variables and an optional .env file.

    Engine fields mirror :class:`clipsuggest.pipeline_config.SuggestionConfig`,
    which validates them; times are in seconds.
    """

    # API keys (only the one for the selected provider is required)
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Supabase (read-only access to videos/subtitles)
    supabase_url: str = ""
    supabase_key: str = ""

    # HTTP server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Oracle
    oracle_provider: str = "anthropic"
    llm_model: str = "claude-sonnet-4-20250514"
    openai_model: str = "gpt-4o-mini"
    oracle_timeout: float = 10.0
    max_output_tokens: int = 1024
    max_in_flight: int = 4

    # Suggestion engine
    window_span: float = 120.0
    window_stride: float = 90.0
    confidence_threshold: float = 0.6
    merge_gap: int = 3
    suggestion_limit: int = 5

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide Settings.

    Falls back to environment variables and defaults when the .env file
    cannot be read.
    """
    try:
        return Settings()
    except Exception:
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
