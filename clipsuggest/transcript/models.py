"""Data models for transcript input."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TranscriptSegment:
    """One timestamped unit of spoken text.

    Transcripts are sequences of segments ordered by ``start_time``.  Segments
    may be contiguous, gapped or (rarely) overlapping.
    """

    start_time: float
    end_time: float
    text: str
