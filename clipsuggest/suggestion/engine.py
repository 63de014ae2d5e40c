"""Clip-suggestion pipeline: validate -> window -> classify -> merge -> rank."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from clipsuggest.pipeline_config import SuggestionConfig
from clipsuggest.suggestion.aggregator import aggregate_candidates
from clipsuggest.suggestion.merging import merge_candidates
from clipsuggest.suggestion.models import SuggestionResult
from clipsuggest.suggestion.oracle import OracleClient
from clipsuggest.suggestion.ranking import rank_candidates
from clipsuggest.suggestion.windowing import build_windows
from clipsuggest.transcript.models import TranscriptSegment

logger = logging.getLogger(__name__)


class InvalidSuggestionRequest(ValueError):
    """The caller supplied an empty transcript or prompt."""


def validate_request(transcript: Sequence[TranscriptSegment], prompt: str) -> None:
    """Reject inputs the engine cannot analyse.

    Raises:
        InvalidSuggestionRequest: If *transcript* is empty or *prompt* is blank.
    """
    if not transcript:
        raise InvalidSuggestionRequest("Transcript has no segments to analyse")
    if not prompt or not prompt.strip():
        raise InvalidSuggestionRequest("Prompt must be a non-empty string")


async def suggest_clips_async(
    transcript: Sequence[TranscriptSegment],
    prompt: str,
    oracle: OracleClient,
    config: SuggestionConfig | None = None,
) -> SuggestionResult:
    """Find the transcript ranges that best match *prompt*.

    Args:
        transcript: Non-empty segments sorted by ``start_time``.
        prompt: What to look for, e.g. ``"funny moments"``.
        oracle: Client used for every per-window classification call.
        config: Engine tunables; defaults to :class:`SuggestionConfig`.

    Returns:
        Up to ``config.limit`` non-overlapping suggestions, most confident
        first, with per-window failure diagnostics.  An empty list is a valid
        outcome.

    Raises:
        InvalidSuggestionRequest: On empty transcript or prompt.
    """
    validate_request(transcript, prompt)
    config = config or SuggestionConfig()
    prompt = prompt.strip()

    windows = build_windows(transcript, config.window_span, config.window_stride)
    logger.info(
        "Analysing %d segments in %d windows for prompt %r",
        len(transcript),
        len(windows),
        prompt,
    )

    aggregated = await aggregate_candidates(
        windows,
        prompt,
        oracle,
        confidence_threshold=config.confidence_threshold,
        timeout=config.oracle_timeout,
        max_in_flight=config.max_in_flight,
    )
    merged = merge_candidates(aggregated.candidates, gap=config.merge_gap)
    suggestions = rank_candidates(merged, transcript, limit=config.limit)

    logger.info(
        "Produced %d suggestions from %d raw candidates (%d/%d windows failed)",
        len(suggestions),
        len(aggregated.candidates),
        len(aggregated.failures),
        len(windows),
    )
    return SuggestionResult(
        suggestions=suggestions,
        windows_analyzed=aggregated.windows_analyzed,
        failures=aggregated.failures,
    )


def suggest_clips(
    transcript: Sequence[TranscriptSegment],
    prompt: str,
    oracle: OracleClient,
    config: SuggestionConfig | None = None,
) -> SuggestionResult:
    """Synchronous wrapper around :func:`suggest_clips_async` for scripts and the CLI."""
    return asyncio.run(suggest_clips_async(transcript, prompt, oracle, config))
