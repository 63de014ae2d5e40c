"""Pydantic request/response schemas for the Clip Suggestions API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from clipsuggest.suggestion.models import SuggestionResult
from clipsuggest.transcript.models import TranscriptSegment


class Subtitle(BaseModel):
    """A single transcript segment, times in seconds."""

    start_time: float = Field(ge=0, allow_inf_nan=False)
    end_time: float = Field(ge=0, allow_inf_nan=False)
    text: str

    @model_validator(mode="after")
    def _check_order(self) -> Subtitle:
        if self.start_time > self.end_time:
            raise ValueError("start_time must not be after end_time")
        return self

    def to_segment(self) -> TranscriptSegment:
        return TranscriptSegment(start_time=self.start_time, end_time=self.end_time, text=self.text)


class SubtitlesResponse(BaseModel):
    """Response body for the /api/videos/{id}/subtitles endpoint."""

    subtitles: list[Subtitle]


class SuggestClipsRequest(BaseModel):
    """Request body for the /api/suggest-clips endpoint (inline transcript)."""

    prompt: str
    segments: list[Subtitle]
    limit: int | None = Field(default=None, ge=0, le=50)

    @field_validator("segments")
    @classmethod
    def _check_sorted(cls, segments: list[Subtitle]) -> list[Subtitle]:
        for prev, nxt in zip(segments, segments[1:]):
            if nxt.start_time < prev.start_time:
                raise ValueError("segments must be sorted by start_time")
        return segments


class ClipSuggestionResponse(BaseModel):
    """A single suggested clip."""

    start_time: float
    end_time: float
    confidence: float
    reason: str = ""


class SuggestClipsResponse(BaseModel):
    """Ranked clip suggestions plus per-request diagnostics."""

    suggestions: list[ClipSuggestionResponse]
    windows_analyzed: int = 0
    windows_failed: int = 0

    @classmethod
    def from_result(cls, result: SuggestionResult) -> SuggestClipsResponse:
        return cls(
            suggestions=[
                ClipSuggestionResponse(
                    start_time=s.start_time,
                    end_time=s.end_time,
                    confidence=s.confidence,
                    reason=s.reason,
                )
                for s in result.suggestions
            ],
            windows_analyzed=result.windows_analyzed,
            windows_failed=result.windows_failed,
        )
