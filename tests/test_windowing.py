"""Tests for splitting transcripts into overlapping analysis windows."""

from __future__ import annotations

import random

import pytest

from conftest import make_transcript

from clipsuggest.suggestion.windowing import build_windows
from clipsuggest.transcript.models import TranscriptSegment


def _random_transcript(seed: int, count: int) -> list[TranscriptSegment]:
    rng = random.Random(seed)
    segments: list[TranscriptSegment] = []
    t = rng.uniform(0, 30)
    for i in range(count):
        duration = rng.uniform(0.5, 40)
        segments.append(TranscriptSegment(start_time=t, end_time=t + duration, text=f"s{i}"))
        # Mostly contiguous, sometimes gapped, occasionally overlapping.
        t += duration + rng.choice([0.0, 0.0, rng.uniform(0, 200), -min(duration, 2.0)])
    segments.sort(key=lambda s: s.start_time)
    return segments


class TestBuildWindows:
    def test_short_transcript_fits_one_window(
        self, podcast_transcript: list[TranscriptSegment]
    ) -> None:
        windows = build_windows(podcast_transcript, window_span=120, stride=90)
        assert len(windows) == 1
        assert windows[0].start_index == 0
        assert windows[0].end_index == len(podcast_transcript) - 1

    def test_overlapping_windows(self) -> None:
        transcript = make_transcript(30, seconds_each=10.0)  # starts 0..290
        windows = build_windows(transcript, window_span=120, stride=90)

        assert [(w.start_index, w.end_index) for w in windows] == [
            (0, 12),
            (9, 21),
            (18, 29),
            (27, 29),
        ]

    def test_window_segments_are_transcript_slice(self) -> None:
        transcript = make_transcript(30, seconds_each=10.0)
        for w in build_windows(transcript, window_span=120, stride=90):
            assert list(w.segments) == transcript[w.start_index : w.end_index + 1]

    def test_window_span_is_inclusive(self) -> None:
        transcript = make_transcript(5, seconds_each=30.0)  # starts 0, 30, 60, 90, 120
        windows = build_windows(transcript, window_span=120, stride=90)
        assert windows[0].end_index == 4

    def test_segment_longer_than_span(self) -> None:
        transcript = [TranscriptSegment(start_time=0.0, end_time=600.0, text="monologue")]
        windows = build_windows(transcript, window_span=120, stride=90)
        assert len(windows) == 1
        assert (windows[0].start_index, windows[0].end_index) == (0, 0)

    def test_gaps_emit_no_empty_windows(self) -> None:
        transcript = [
            TranscriptSegment(start_time=0.0, end_time=5.0, text="intro"),
            TranscriptSegment(start_time=500.0, end_time=505.0, text="outro"),
        ]
        windows = build_windows(transcript, window_span=120, stride=90)
        assert [(w.start_index, w.end_index) for w in windows] == [(0, 0), (1, 1)]
        assert all(w.segments for w in windows)

    def test_empty_transcript(self) -> None:
        assert build_windows([], window_span=120, stride=90) == []

    @pytest.mark.parametrize("stride", [0, -5])
    def test_non_positive_stride_rejected(self, stride: float) -> None:
        with pytest.raises(ValueError):
            build_windows(make_transcript(3), window_span=120, stride=stride)

    def test_stride_larger_than_span_rejected(self) -> None:
        with pytest.raises(ValueError):
            build_windows(make_transcript(3), window_span=60, stride=90)


class TestWindowProperties:
    @pytest.mark.parametrize("seed", range(8))
    @pytest.mark.parametrize(("span", "stride"), [(120, 90), (60, 20), (30, 29.5), (45, 45)])
    def test_every_segment_is_covered(self, seed: int, span: float, stride: float) -> None:
        transcript = _random_transcript(seed, count=60)
        windows = build_windows(transcript, window_span=span, stride=stride)

        covered = set()
        for w in windows:
            covered.update(range(w.start_index, w.end_index + 1))
        assert covered == set(range(len(transcript)))

    @pytest.mark.parametrize("seed", range(8))
    def test_start_indices_non_decreasing(self, seed: int) -> None:
        transcript = _random_transcript(seed, count=60)
        windows = build_windows(transcript, window_span=120, stride=90)

        starts = [w.start_index for w in windows]
        assert starts == sorted(starts)
        assert all(w.start_index <= w.end_index for w in windows)
