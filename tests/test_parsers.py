"""Tests for transcript parsers (pure functions, no API calls)."""

from __future__ import annotations

import json

import pytest

from conftest import FIXTURES_DIR

from clipsuggest.transcript.parsers import (
    parse_json,
    parse_segments_json,
    parse_transcript,
    parse_vtt,
    parse_whisper_json,
)


class TestParseVtt:
    def test_basic_cues(self) -> None:
        vtt = """WEBVTT

00:00:00.000 --> 00:00:05.000
Welcome to our tech podcast!

00:00:05.000 --> 00:00:15.500
Let me tell you this hilarious story.
"""
        segments = parse_vtt(vtt)
        assert len(segments) == 2
        assert segments[0].start_time == 0.0
        assert segments[0].end_time == 5.0
        assert segments[1].end_time == 15.5
        assert segments[1].text == "Let me tell you this hilarious story."

    def test_multiline_cue_and_tags(self) -> None:
        vtt = """WEBVTT

1
00:01:05.000 --> 00:01:15.250
<v Host>Oh no! I forgot</v>
to turn off my test deployment!
"""
        segments = parse_vtt(vtt)
        assert len(segments) == 1
        assert segments[0].start_time == 65.0
        assert segments[0].text == "Oh no! I forgot to turn off my test deployment!"

    def test_short_timestamps(self) -> None:
        segments = parse_vtt("WEBVTT\n\n01:30.500 --> 01:35.000\nShort form.\n")
        assert segments[0].start_time == 90.5

    def test_blank_cues_are_skipped(self) -> None:
        vtt = "WEBVTT\n\n00:00:00.000 --> 00:00:01.000\n<i></i>\n\n00:00:01.000 --> 00:00:02.000\nHi\n"
        assert [s.text for s in parse_vtt(vtt)] == ["Hi"]

    def test_empty_file(self) -> None:
        assert parse_vtt("WEBVTT\n") == []


class TestParseWhisperJson:
    def test_offsets_are_milliseconds(self) -> None:
        data = {
            "transcription": [
                {"offsets": {"from": 0, "to": 5000}, "text": " Welcome back."},
                {"offsets": {"from": 5000, "to": 12500}, "text": " Story time."},
            ]
        }
        segments = parse_whisper_json(json.dumps(data))
        assert [(s.start_time, s.end_time) for s in segments] == [(0.0, 5.0), (5.0, 12.5)]
        assert segments[0].text == "Welcome back."

    def test_missing_transcription_key(self) -> None:
        with pytest.raises(ValueError, match="transcription"):
            parse_whisper_json(json.dumps({"segments": []}))

    def test_missing_offsets(self) -> None:
        with pytest.raises(ValueError, match="offsets"):
            parse_whisper_json(json.dumps({"transcription": [{"text": "hi"}]}))


class TestParseSegmentsJson:
    def test_bare_list(self) -> None:
        data = [{"start_time": 0, "end_time": 5, "text": "Hello"}]
        segments = parse_segments_json(json.dumps(data))
        assert segments[0].end_time == 5.0

    @pytest.mark.parametrize("key", ["segments", "subtitles"])
    def test_wrapped_list(self, key: str) -> None:
        data = {key: [{"start_time": 1.5, "end_time": 2.5, "text": "Hello"}]}
        assert parse_segments_json(json.dumps(data))[0].start_time == 1.5

    def test_output_sorted_stably_by_start(self) -> None:
        data = [
            {"start_time": 10, "end_time": 12, "text": "later"},
            {"start_time": 0, "end_time": 5, "text": "first"},
            {"start_time": 0, "end_time": 3, "text": "second"},
        ]
        assert [s.text for s in parse_segments_json(json.dumps(data))] == ["first", "second", "later"]

    def test_blank_text_dropped(self) -> None:
        data = [
            {"start_time": 0, "end_time": 1, "text": "   "},
            {"start_time": 1, "end_time": 2, "text": "kept"},
        ]
        assert [s.text for s in parse_segments_json(json.dumps(data))] == ["kept"]

    @pytest.mark.parametrize(
        ("item", "message"),
        [
            ({"start_time": 5, "end_time": 1, "text": "x"}, "starts after it ends"),
            ({"start_time": "a", "end_time": 1, "text": "x"}, "non-numeric"),
            ({"start_time": 0, "end_time": 1, "text": 3}, "non-string"),
        ],
    )
    def test_invalid_segments(self, item: dict, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            parse_segments_json(json.dumps([item]))

    def test_unrecognized_object(self) -> None:
        with pytest.raises(ValueError, match="Unrecognized"):
            parse_segments_json(json.dumps({"words": []}))


class TestParseTranscript:
    def test_podcast_fixture(self) -> None:
        content = (FIXTURES_DIR / "podcast_transcript.json").read_text(encoding="utf-8")
        segments = parse_transcript(content, "json")
        assert len(segments) == 11
        assert segments[0].start_time == 0.0
        assert segments[-1].end_time == 90.0
        assert "cat pictures" in segments[2].text

    def test_json_autodetects_whisper(self) -> None:
        data = {"transcription": [{"offsets": {"from": 1000, "to": 2000}, "text": "x"}]}
        assert parse_json(json.dumps(data))[0].start_time == 1.0

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="Unknown transcript format"):
            parse_transcript("", "srt")

    def test_invalid_json(self) -> None:
        with pytest.raises(ValueError, match="Invalid JSON"):
            parse_transcript("{not json", "segments")

    @pytest.mark.parametrize("transcription", [42, "text", {"offsets": {}}])
    def test_non_list_transcription_is_a_value_error(self, transcription: object) -> None:
        content = json.dumps({"transcription": transcription})
        with pytest.raises(ValueError, match="must be a list"):
            parse_transcript(content, "whisper")
