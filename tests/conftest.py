"""Shared test helpers: a deterministic oracle and transcript builders."""

from __future__ import annotations

import pathlib
import threading
import time
from dataclasses import dataclass
from typing import Any

import pytest

from clipsuggest.transcript.models import TranscriptSegment
from clipsuggest.transcript.parsers import parse_transcript

FIXTURES_DIR = pathlib.Path(__file__).parent / "fixtures"


def marker(start_time: float) -> str:
    """Prefix of a serialized window whose first segment starts at *start_time*."""
    return f"[start={start_time:.2f} "


def make_transcript(count: int, seconds_each: float = 9.0) -> list[TranscriptSegment]:
    """Contiguous segments: segment i covers ``[i * seconds_each, (i + 1) * seconds_each]``."""
    return [
        TranscriptSegment(
            start_time=i * seconds_each,
            end_time=(i + 1) * seconds_each,
            text=f"Segment {i} text.",
        )
        for i in range(count)
    ]


@dataclass
class Slow:
    """A scripted reply delivered only after sleeping *seconds*."""

    seconds: float
    reply: Any = None


class ScriptedOracle:
    """Oracle stub that answers by matching the window's first line.

    ``replies`` maps a :func:`marker` prefix to a payload, an exception to
    raise, or a :class:`Slow` wrapper.  Windows that match no prefix get
    ``default`` (an empty match list unless set).
    """

    def __init__(self, replies: dict[str, Any] | None = None, default: Any = None) -> None:
        self.replies = replies or {}
        self.default = default if default is not None else {"matches": []}
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def complete(self, window_text: str, prompt: str) -> Any:
        with self._lock:
            self.calls.append((window_text, prompt))

        reply = self.default
        for prefix, scripted in self.replies.items():
            if window_text.startswith(prefix):
                reply = scripted
                break

        if isinstance(reply, Slow):
            time.sleep(reply.seconds)
            reply = reply.reply if reply.reply is not None else {"matches": []}
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def podcast_transcript() -> list[TranscriptSegment]:
    """The 11-segment demo podcast (0-90s) with funny, technical and controversial parts."""
    content = (FIXTURES_DIR / "podcast_transcript.json").read_text(encoding="utf-8")
    return parse_transcript(content, "json")
