"""Coalesce overlapping or near-adjacent candidates into maximal spans."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from clipsuggest.suggestion.models import RawCandidate


def merge_candidates(raw: Iterable[RawCandidate], gap: int = 3) -> list[RawCandidate]:
    """Merge candidates separated by at most *gap* intervening segments.

    Candidates are sorted by ``(start_index, end_index)`` and swept left to
    right.  A candidate starting at or before ``current.end_index + gap`` is
    folded into the current span: the end index and confidence take the max
    and the reasons are joined with ``"; "``.  An empty reason adds no
    separator.

    Returns:
        Mutually non-overlapping spans in chronological order.  Merging the
        output again returns it unchanged.
    """
    ordered = sorted(raw, key=lambda c: (c.start_index, c.end_index))
    if not ordered:
        return []

    merged: list[RawCandidate] = []
    current = ordered[0]
    for nxt in ordered[1:]:
        if nxt.start_index <= current.end_index + gap:
            current = replace(
                current,
                end_index=max(current.end_index, nxt.end_index),
                confidence=max(current.confidence, nxt.confidence),
                reason=_join_reasons(current.reason, nxt.reason),
            )
        else:
            merged.append(current)
            current = nxt
    merged.append(current)

    return merged


def _join_reasons(first: str, second: str) -> str:
    if not first:
        return second
    if not second:
        return first
    return f"{first}; {second}"
