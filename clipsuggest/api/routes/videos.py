"""Video endpoints: stored subtitles and clip suggestions over them."""

from __future__ import annotations

from dataclasses import replace
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from clipsuggest.api.dependencies import get_oracle, get_suggestion_config
from clipsuggest.api.models import Subtitle, SubtitlesResponse, SuggestClipsResponse
from clipsuggest.pipeline_config import SuggestionConfig
from clipsuggest.suggestion.engine import InvalidSuggestionRequest, suggest_clips_async
from clipsuggest.suggestion.oracle import OracleClient
from clipsuggest.transcript.models import TranscriptSegment
from clipsuggest.transcript.storage import fetch_subtitles, get_supabase_client, video_exists

router = APIRouter()


def _load_transcript(video_id: str) -> list[TranscriptSegment]:
    """Fetch a video's subtitles, raising 404 if the video or subtitles are missing."""
    client = get_supabase_client()
    if not video_exists(client, video_id):
        raise HTTPException(status_code=404, detail="Video not found")

    segments = fetch_subtitles(client, video_id)
    if not segments:
        raise HTTPException(status_code=404, detail="Subtitles not found for this video")
    return segments


@router.get("/api/videos/{video_id}/subtitles", response_model=SubtitlesResponse)
async def get_subtitles(video_id: str) -> SubtitlesResponse:
    """Return a video's subtitles ordered by start time."""
    segments = _load_transcript(video_id)
    return SubtitlesResponse(
        subtitles=[
            Subtitle(start_time=s.start_time, end_time=s.end_time, text=s.text)
            for s in segments
        ]
    )


@router.get("/api/videos/{video_id}/suggest-clips", response_model=SuggestClipsResponse)
async def suggest_video_clips(
    video_id: str,
    prompt: Annotated[str, Query(description="What to look for, e.g. 'funny moments'")],
    oracle: Annotated[OracleClient, Depends(get_oracle)],
    config: Annotated[SuggestionConfig, Depends(get_suggestion_config)],
    limit: Annotated[int | None, Query(ge=0, le=50)] = None,
) -> SuggestClipsResponse:
    """Suggest clips from a stored video's subtitles that match *prompt*.

    Each transcript window is scored by the LLM; overlapping matches are
    merged and the most confident spans are returned.  An empty list means
    nothing matched (or every LLM call failed; see ``windows_failed``).
    """
    if not prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must be a non-empty string")

    segments = _load_transcript(video_id)
    if limit is not None:
        config = replace(config, limit=limit)

    try:
        result = await suggest_clips_async(segments, prompt, oracle, config)
    except InvalidSuggestionRequest as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return SuggestClipsResponse.from_result(result)
