"""Rank merged spans by confidence and project them back onto timestamps."""

from __future__ import annotations

from collections.abc import Sequence

from clipsuggest.suggestion.models import ClipSuggestion, RawCandidate
from clipsuggest.transcript.models import TranscriptSegment


def rank_candidates(
    merged: Sequence[RawCandidate],
    transcript: Sequence[TranscriptSegment],
    limit: int = 5,
) -> list[ClipSuggestion]:
    """Return the *limit* most confident spans as clip suggestions.

    The sort is stable, so equally confident spans keep their chronological
    order.  ``start_time`` comes from the first segment's ``start_time`` and
    ``end_time`` from the last segment's ``end_time``.
    """
    ranked = sorted(merged, key=lambda c: c.confidence, reverse=True)[: max(limit, 0)]
    return [
        ClipSuggestion(
            start_time=transcript[c.start_index].start_time,
            end_time=transcript[c.end_index].end_time,
            confidence=c.confidence,
            reason=c.reason,
        )
        for c in ranked
    ]
