"""Window classifier: one oracle call per window, validated and snapped to segments."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from clipsuggest.suggestion.models import AnalysisWindow, RawCandidate, WindowFailure
from clipsuggest.suggestion.oracle import OracleClient, OracleError

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class OracleResponseError(ValueError):
    """The oracle replied, but the payload is not a valid list of matches."""


class OracleMatch(BaseModel):
    """One match as reported by the oracle, in transcript seconds."""

    start_time: float = Field(allow_inf_nan=False)
    end_time: float = Field(allow_inf_nan=False)
    confidence: float = Field(ge=0.0, le=1.0, allow_inf_nan=False)
    reason: str = ""


class OracleReply(BaseModel):
    matches: list[OracleMatch]


def format_window(window: AnalysisWindow) -> str:
    """Serialize a window as one ``[start=.. end=..] text`` line per segment."""
    return "\n".join(
        f"[start={seg.start_time:.2f} end={seg.end_time:.2f}] {seg.text}"
        for seg in window.segments
    )


def parse_oracle_payload(payload: Any) -> list[OracleMatch]:
    """Validate a raw oracle payload into matches.

    Accepts a ``{"matches": [...]}`` object, a bare list of matches, or either
    of those as a JSON string (optionally wrapped in a markdown code fence).

    Raises:
        OracleResponseError: If the payload is unparseable or any match is
            malformed, including a confidence outside ``[0, 1]``.
    """
    if isinstance(payload, str):
        text = payload.strip()
        fenced = _CODE_FENCE_RE.search(text)
        if fenced:
            text = fenced.group(1)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise OracleResponseError(f"Invalid JSON: {exc.msg}") from exc

    if isinstance(payload, list):
        payload = {"matches": payload}

    try:
        return OracleReply.model_validate(payload).matches
    except ValidationError as exc:
        raise OracleResponseError(
            f"Malformed oracle reply ({exc.error_count()} validation errors)"
        ) from exc


def nearest_index(values: Sequence[float], target: float) -> int | None:
    """Return the index of the value closest to *target*, earliest on ties.

    Returns None for an empty sequence.
    """
    best: int | None = None
    best_distance = 0.0
    for i, value in enumerate(values):
        distance = abs(value - target)
        if best is None or distance < best_distance:
            best = i
            best_distance = distance
    return best


def snap_match(match: OracleMatch, window: AnalysisWindow) -> RawCandidate | None:
    """Snap a match's timestamps to the window's segments.

    The start snaps to the nearest segment ``start_time`` and the end to the
    nearest segment ``end_time``, independently.  Returns None when either
    bound cannot be resolved or the snapped range is inverted.
    """
    start = nearest_index([seg.start_time for seg in window.segments], match.start_time)
    end = nearest_index([seg.end_time for seg in window.segments], match.end_time)
    if start is None or end is None or start > end:
        return None
    return RawCandidate(
        start_index=window.start_index + start,
        end_index=window.start_index + end,
        confidence=match.confidence,
        reason=match.reason.strip(),
    )


def candidates_from_matches(
    matches: list[OracleMatch],
    window: AnalysisWindow,
    confidence_threshold: float,
) -> list[RawCandidate]:
    """Drop matches at or below the threshold and snap the rest to segments."""
    candidates: list[RawCandidate] = []
    for match in matches:
        if match.confidence <= confidence_threshold:
            logger.debug(
                "Dropping match %.2f-%.2f: confidence %.2f <= %.2f",
                match.start_time,
                match.end_time,
                match.confidence,
                confidence_threshold,
            )
            continue
        candidate = snap_match(match, window)
        if candidate is None:
            logger.debug(
                "Dropping match %.2f-%.2f: no valid segment range",
                match.start_time,
                match.end_time,
            )
            continue
        candidates.append(candidate)
    return candidates


def _on_call_done(slots: asyncio.Semaphore | None) -> Callable[[asyncio.Future[Any]], None]:
    def release(call: asyncio.Future[Any]) -> None:
        if slots is not None:
            slots.release()
        # Mark a late failure as retrieved; the window already reported it.
        if not call.cancelled():
            call.exception()

    return release


async def classify_window(
    window: AnalysisWindow,
    prompt: str,
    oracle: OracleClient,
    *,
    window_index: int = 0,
    confidence_threshold: float = 0.6,
    timeout: float = 10.0,
    slots: asyncio.Semaphore | None = None,
) -> tuple[list[RawCandidate], WindowFailure | None]:
    """Score one window against *prompt* and return its surviving candidates.

    The oracle call runs in a worker thread bounded by *timeout*.  Any failure
    (timeout, oracle error, malformed reply) is logged and returned as a
    :class:`WindowFailure` alongside an empty candidate list; nothing is raised.

    When *slots* is given, one slot is acquired before the call and released
    only once the worker thread returns.  A timed-out call keeps its slot
    until then, so abandoned calls still count against the concurrency bound.
    The timeout starts after the slot is acquired.

    Returns:
        ``(candidates, failure)`` where *failure* is None on success.
    """
    window_text = format_window(window)
    if slots is not None:
        await slots.acquire()
    call = asyncio.ensure_future(asyncio.to_thread(oracle.complete, window_text, prompt))
    call.add_done_callback(_on_call_done(slots))

    try:
        payload = await asyncio.wait_for(asyncio.shield(call), timeout=timeout)
        matches = parse_oracle_payload(payload)
    except TimeoutError:
        reason = f"oracle call timed out after {timeout:g}s"
    except (OracleError, OracleResponseError) as exc:
        reason = str(exc)
    except Exception as exc:
        logger.exception("Unexpected oracle failure for window %d", window_index)
        reason = f"{type(exc).__name__}: {exc}"
    else:
        return candidates_from_matches(matches, window, confidence_threshold), None

    logger.warning(
        "Window %d (segments %d-%d) contributed no candidates: %s",
        window_index,
        window.start_index,
        window.end_index,
        reason,
    )
    return [], WindowFailure(window_index=window_index, reason=reason)
