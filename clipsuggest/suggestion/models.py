"""Data models for the clip-suggestion engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from clipsuggest.transcript.models import TranscriptSegment


@dataclass(frozen=True)
class AnalysisWindow:
    """A contiguous slice of the transcript submitted to the oracle in one call.

    ``start_index`` and ``end_index`` are inclusive indices into the source
    transcript; ``segments`` is ``transcript[start_index : end_index + 1]``.
    """

    segments: tuple[TranscriptSegment, ...]
    start_index: int
    end_index: int


@dataclass(frozen=True)
class RawCandidate:
    """An oracle-reported match expressed in transcript segment indices."""

    start_index: int
    end_index: int
    confidence: float
    reason: str = ""


@dataclass(frozen=True)
class ClipSuggestion:
    """A final, segment-aligned time range returned to callers."""

    start_time: float
    end_time: float
    confidence: float
    reason: str = ""


@dataclass(frozen=True)
class WindowFailure:
    """Diagnostic record for a window that contributed no candidates."""

    window_index: int
    reason: str


@dataclass
class AggregationResult:
    """Surviving candidates from every window plus per-window failures."""

    candidates: list[RawCandidate] = field(default_factory=list)
    failures: list[WindowFailure] = field(default_factory=list)
    windows_analyzed: int = 0


@dataclass
class SuggestionResult:
    """Engine output: ranked suggestions and request-level diagnostics."""

    suggestions: list[ClipSuggestion]
    windows_analyzed: int = 0
    failures: list[WindowFailure] = field(default_factory=list)

    @property
    def windows_failed(self) -> int:
        return len(self.failures)
