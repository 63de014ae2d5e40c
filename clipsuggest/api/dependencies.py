"""Shared FastAPI dependencies: the process-wide oracle and engine configuration."""

from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from clipsuggest.config import settings
from clipsuggest.pipeline_config import SuggestionConfig
from clipsuggest.suggestion.oracle import OracleClient, OracleError, build_oracle


@lru_cache(maxsize=1)
def _cached_oracle() -> OracleClient:
    return build_oracle(settings)


def get_oracle() -> OracleClient:
    """Return the shared oracle client, or 503 if it cannot be configured."""
    try:
        return _cached_oracle()
    except OracleError as exc:
        raise HTTPException(status_code=503, detail=f"LLM unavailable: {exc}") from exc


@lru_cache(maxsize=1)
def get_suggestion_config() -> SuggestionConfig:
    """Return the engine configuration derived from settings."""
    return SuggestionConfig.from_settings(settings)
