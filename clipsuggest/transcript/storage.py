"""Supabase read helpers for videos and their subtitles."""

from __future__ import annotations

import os
from typing import Any, cast

from supabase import Client, create_client

from clipsuggest.transcript.models import TranscriptSegment


def get_supabase_client() -> Client:
    """Create and return a Supabase client from environment variables."""
    return create_client(
        os.getenv("SUPABASE_URL", ""),
        os.getenv("SUPABASE_KEY", ""),
    )


def video_exists(client: Client, video_id: str) -> bool:
    """Return True if a row with *video_id* exists in the ``videos`` table."""
    result = client.table("videos").select("id").eq("id", video_id).execute()
    return bool(result.data)


def fetch_subtitles(client: Client, video_id: str) -> list[TranscriptSegment]:
    """Fetch the subtitles of a video ordered by start time.

    Rows hold ``start_time``/``end_time`` in seconds.  An unknown video and a
    video without subtitles both yield an empty list.
    """
    result = (
        client.table("subtitles")
        .select("start_time, end_time, text")
        .eq("video_id", video_id)
        .order("start_time")
        .execute()
    )
    # Supabase .data is typed as JSON (broad union); cast to concrete type.
    rows = cast(list[dict[str, Any]], result.data)
    return [
        TranscriptSegment(
            start_time=float(row["start_time"]),
            end_time=float(row["end_time"]),
            text=str(row["text"]),
        )
        for row in rows
    ]
