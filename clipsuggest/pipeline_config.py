"""Suggestion pipeline configuration: oracle provider enum and SuggestionConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clipsuggest.config import Settings


class OracleProvider(str, Enum):
    """Supported text-understanding backends for window classification."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


@dataclass(frozen=True)
class SuggestionConfig:
    """Immutable tunables for the clip-suggestion engine.

    Window span, stride and timeout are in seconds.  Consecutive windows
    overlap by ``window_span - window_stride``.  ``merge_gap`` counts
    transcript segments, not seconds.
    """

    window_span: float = 120.0
    window_stride: float = 90.0
    confidence_threshold: float = 0.6
    merge_gap: int = 3
    limit: int = 5
    oracle_timeout: float = 10.0
    max_in_flight: int = 4

    def __post_init__(self) -> None:
        if self.window_span <= 0:
            raise ValueError(f"window_span must be positive, got {self.window_span}")
        if self.window_stride <= 0:
            raise ValueError(f"window_stride must be positive, got {self.window_stride}")
        if self.window_stride > self.window_span:
            msg = (
                f"window_stride ({self.window_stride}) must not exceed "
                f"window_span ({self.window_span}); segments would be skipped"
            )
            raise ValueError(msg)
        if not 0.0 <= self.confidence_threshold <= 1.0:
            msg = f"confidence_threshold must be within [0, 1], got {self.confidence_threshold}"
            raise ValueError(msg)
        if self.merge_gap < 0:
            raise ValueError(f"merge_gap must be >= 0, got {self.merge_gap}")
        if self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")
        if self.oracle_timeout <= 0:
            raise ValueError(f"oracle_timeout must be positive, got {self.oracle_timeout}")
        if self.max_in_flight < 1:
            raise ValueError(f"max_in_flight must be >= 1, got {self.max_in_flight}")

    @classmethod
    def from_settings(cls, settings: Settings) -> SuggestionConfig:
        """Build the engine configuration from application settings."""
        return cls(
            window_span=settings.window_span,
            window_stride=settings.window_stride,
            confidence_threshold=settings.confidence_threshold,
            merge_gap=settings.merge_gap,
            limit=settings.suggestion_limit,
            oracle_timeout=settings.oracle_timeout,
            max_in_flight=settings.max_in_flight,
        )
