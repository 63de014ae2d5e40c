"""Transcript parsers for whisper.cpp JSON, segment JSON, and WebVTT formats."""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from clipsuggest.transcript.models import TranscriptSegment

_VTT_TIMESTAMP_RE = re.compile(
    r"(\d{1,2}:\d{2}:\d{2}[.,]\d{3}|\d{2}:\d{2}[.,]\d{3})\s*-->\s*"
    r"(\d{1,2}:\d{2}:\d{2}[.,]\d{3}|\d{2}:\d{2}[.,]\d{3})"
)
_VTT_TAG_RE = re.compile(r"</?[^>]+>")


def _parse_vtt_timestamp(ts: str) -> float:
    """Convert a VTT timestamp (HH:MM:SS.mmm or MM:SS.mmm) to seconds."""
    parts = ts.strip().replace(",", ".").split(":")
    if len(parts) == 3:
        hours, minutes, seconds = parts
    else:
        hours = "0"
        minutes, seconds = parts
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def _sorted_segments(segments: list[TranscriptSegment]) -> list[TranscriptSegment]:
    # Stable, so equal start times keep their source order.
    return sorted(segments, key=lambda s: s.start_time)


def _make_segment(
    start: Any, end: Any, text: Any, position: int, scale: float = 1.0
) -> TranscriptSegment | None:
    """Build a segment from loosely typed JSON values, or None for blank text.

    *scale* converts the source time unit to seconds.
    """
    if not isinstance(text, str):
        raise ValueError(f"Segment {position} has non-string text: {text!r}")
    stripped = text.strip()
    if not stripped:
        return None
    try:
        start_time = float(start) * scale
        end_time = float(end) * scale
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Segment {position} has non-numeric timestamps") from exc
    if start_time > end_time:
        msg = f"Segment {position} starts after it ends ({start_time} > {end_time})"
        raise ValueError(msg)
    return TranscriptSegment(start_time=start_time, end_time=end_time, text=stripped)


def parse_vtt(content: str) -> list[TranscriptSegment]:
    """Parse a WebVTT file into transcript segments.

    Handles cue timings like ``00:01:23.456 --> 00:01:30.789``.  Multi-line
    cues are joined with spaces and inline tags such as ``<v Speaker>`` are
    stripped.
    """
    segments: list[TranscriptSegment] = []

    lines = content.strip().splitlines()
    i = 0
    while i < len(lines):
        match = _VTT_TIMESTAMP_RE.search(lines[i])
        if not match:
            i += 1
            continue

        start = _parse_vtt_timestamp(match.group(1))
        end = _parse_vtt_timestamp(match.group(2))

        # Collect text lines until blank line or next timestamp / end
        text_lines: list[str] = []
        i += 1
        while i < len(lines) and lines[i].strip() and not _VTT_TIMESTAMP_RE.search(lines[i]):
            text_lines.append(lines[i].strip())
            i += 1

        text = _VTT_TAG_RE.sub("", " ".join(text_lines)).strip()
        if text:
            segments.append(TranscriptSegment(start_time=start, end_time=end, text=text))

    return _sorted_segments(segments)


def parse_whisper_json(content: str) -> list[TranscriptSegment]:
    """Parse whisper.cpp ``--output-json`` output.

    Format::

        {"transcription": [{"offsets": {"from": ms, "to": ms}, "text": "..."}]}

    Offsets are milliseconds and are converted to seconds.
    """
    data = json.loads(content)
    if not isinstance(data, dict) or "transcription" not in data:
        raise ValueError("whisper.cpp JSON must contain a 'transcription' array")

    items = data["transcription"]
    if not isinstance(items, list):
        raise ValueError("whisper.cpp 'transcription' must be a list of segment objects")

    segments: list[TranscriptSegment] = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"Segment {position} must be a JSON object")
        offsets = item.get("offsets")
        if not isinstance(offsets, dict):
            raise ValueError(f"Segment {position} is missing 'offsets'")
        segment = _make_segment(
            offsets.get("from"),
            offsets.get("to"),
            item.get("text", ""),
            position,
            scale=0.001,
        )
        if segment is not None:
            segments.append(segment)

    return _sorted_segments(segments)


def parse_segments_json(content: str) -> list[TranscriptSegment]:
    """Parse a JSON list of segments with times in seconds.

    Accepts a bare list or an object keyed by ``segments`` or ``subtitles``
    (the shape returned by ``GET /api/videos/{id}/subtitles``)::

        {"subtitles": [{"start_time": 0, "end_time": 5, "text": "..."}]}
    """
    data = json.loads(content)
    if isinstance(data, dict):
        for key in ("segments", "subtitles"):
            if key in data:
                data = data[key]
                break
        else:
            msg = f"Unrecognized JSON transcript format. Keys: {list(data.keys())}"
            raise ValueError(msg)

    if not isinstance(data, list):
        raise ValueError("Segment JSON must be a list of segment objects")

    segments: list[TranscriptSegment] = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Segment {position} must be a JSON object")
        segment = _make_segment(
            item.get("start_time"), item.get("end_time"), item.get("text", ""), position
        )
        if segment is not None:
            segments.append(segment)

    return _sorted_segments(segments)


def parse_json(content: str) -> list[TranscriptSegment]:
    """Parse either whisper.cpp output or segment JSON, detected by shape."""
    data = json.loads(content)
    if isinstance(data, dict) and "transcription" in data:
        return parse_whisper_json(content)
    return parse_segments_json(content)


def parse_transcript(content: str, format: str) -> list[TranscriptSegment]:
    """Dispatch to the correct parser based on *format*.

    Args:
        content: Raw transcript text.
        format: One of ``"vtt"``, ``"whisper"``, ``"segments"`` or ``"json"``
                (auto-detects between the two JSON layouts).

    Returns:
        Parsed transcript segments sorted by start time.

    Raises:
        ValueError: If *format* is not recognized or the content is malformed.
    """
    dispatch: dict[str, Callable[[str], list[TranscriptSegment]]] = {
        "vtt": parse_vtt,
        "whisper": parse_whisper_json,
        "segments": parse_segments_json,
        "json": parse_json,
    }

    parser = dispatch.get(format)
    if parser is None:
        msg = f"Unknown transcript format: {format!r}. Supported: {list(dispatch.keys())}"
        raise ValueError(msg)

    try:
        return parser(content)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON transcript: {exc.msg}") from exc
