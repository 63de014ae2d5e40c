"""Run the window classifier over every window with bounded fan-out."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from clipsuggest.suggestion.classifier import classify_window
from clipsuggest.suggestion.models import AggregationResult, AnalysisWindow, WindowFailure
from clipsuggest.suggestion.oracle import OracleClient

logger = logging.getLogger(__name__)


async def aggregate_candidates(
    windows: Sequence[AnalysisWindow],
    prompt: str,
    oracle: OracleClient,
    *,
    confidence_threshold: float = 0.6,
    timeout: float = 10.0,
    max_in_flight: int = 4,
) -> AggregationResult:
    """Classify every window and collect the surviving candidates.

    At most *max_in_flight* oracle calls run at once, counting calls that
    timed out but whose worker thread has not returned yet.  The per-call
    timeout starts once a slot is free, so queued windows are not charged for
    waiting.  Candidate order across windows is unspecified.

    Windows with ``start_index > end_index`` are skipped and reported as
    failures without calling the oracle.  If every window fails the result
    simply has no candidates.
    """
    semaphore = asyncio.Semaphore(max_in_flight)
    result = AggregationResult()

    tasks = []
    for index, window in enumerate(windows):
        if window.start_index > window.end_index or not window.segments:
            logger.warning(
                "Skipping window %d: invalid index range %d-%d",
                index,
                window.start_index,
                window.end_index,
            )
            result.failures.append(
                WindowFailure(window_index=index, reason="invalid window index range")
            )
            continue
        tasks.append(
            classify_window(
                window,
                prompt,
                oracle,
                window_index=index,
                confidence_threshold=confidence_threshold,
                timeout=timeout,
                slots=semaphore,
            )
        )

    result.windows_analyzed = len(tasks)
    for candidates, failure in await asyncio.gather(*tasks):
        result.candidates.extend(candidates)
        if failure is not None:
            result.failures.append(failure)

    result.failures.sort(key=lambda f: f.window_index)
    return result
