"""Suggestion endpoint for transcripts supplied inline in the request body."""

from __future__ import annotations

from dataclasses import replace
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from clipsuggest.api.dependencies import get_oracle, get_suggestion_config
from clipsuggest.api.models import SuggestClipsRequest, SuggestClipsResponse
from clipsuggest.pipeline_config import SuggestionConfig
from clipsuggest.suggestion.engine import InvalidSuggestionRequest, suggest_clips_async
from clipsuggest.suggestion.oracle import OracleClient

router = APIRouter()


@router.post("/api/suggest-clips", response_model=SuggestClipsResponse)
async def suggest_clips(
    request: SuggestClipsRequest,
    oracle: Annotated[OracleClient, Depends(get_oracle)],
    config: Annotated[SuggestionConfig, Depends(get_suggestion_config)],
) -> SuggestClipsResponse:
    """Suggest clips from an inline transcript.

    Empty transcripts and blank prompts are rejected with 400.
    """
    if request.limit is not None:
        config = replace(config, limit=request.limit)

    try:
        result = await suggest_clips_async(
            [s.to_segment() for s in request.segments],
            request.prompt,
            oracle,
            config,
        )
    except InvalidSuggestionRequest as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return SuggestClipsResponse.from_result(result)
