"""Partition an ordered transcript into overlapping, time-bounded windows."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Sequence

from clipsuggest.suggestion.models import AnalysisWindow
from clipsuggest.transcript.models import TranscriptSegment


def build_windows(
    transcript: Sequence[TranscriptSegment],
    window_span: float = 120.0,
    stride: float = 90.0,
) -> list[AnalysisWindow]:
    """Slide a ``[cursor, cursor + window_span]`` range over segment start times.

    Every segment whose ``start_time`` falls inside the closed range belongs
    to the window for that cursor position.  The cursor starts at 0 and moves
    by *stride* until it passes the last segment's ``start_time``.  Cursor
    positions that select nothing (gaps in speech) emit no window.

    Args:
        transcript: Segments sorted by ``start_time``.
        window_span: Length of each window in seconds.
        stride: Cursor advance in seconds; ``stride < window_span`` makes
            consecutive windows overlap.

    Returns:
        Windows in cursor order.  An empty transcript yields no windows.

    Raises:
        ValueError: If *stride* is not positive or exceeds *window_span*.
    """
    if stride <= 0:
        raise ValueError(f"stride must be positive, got {stride}")
    if stride > window_span:
        raise ValueError(f"stride ({stride}) must not exceed window_span ({window_span})")
    if not transcript:
        return []

    starts = [seg.start_time for seg in transcript]
    last_start = starts[-1]

    windows: list[AnalysisWindow] = []
    step = 0
    cursor = 0.0
    while cursor <= last_start:
        lo = bisect_left(starts, cursor)
        hi = bisect_right(starts, cursor + window_span)
        if lo < hi:
            windows.append(
                AnalysisWindow(
                    segments=tuple(transcript[lo:hi]),
                    start_index=lo,
                    end_index=hi - 1,
                )
            )
        step += 1
        # step * stride, not a running sum of strides.
        cursor = step * stride

    return windows
