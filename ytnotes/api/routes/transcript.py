"""Transcript endpoint: fetch a YouTube video's captions."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter

from ytnotes.api.models import TranscriptRequest, TranscriptResponse, TranscriptSegmentModel
from ytnotes.ingestion.youtube import fetch_transcript

router = APIRouter()


@router.post("/api/transcript", response_model=TranscriptResponse)
async def transcript(request: TranscriptRequest) -> TranscriptResponse:
    """Fetch the transcript for ``videoUrl``.

    400 for a URL without a video id, 404 when the video has no captions,
    502 when YouTube could not be reached.
    """
    # youtube-transcript-api is synchronous; keep it off the event loop.
    segments = await asyncio.to_thread(fetch_transcript, request.video_url)
    return TranscriptResponse(
        transcript=[TranscriptSegmentModel.from_segment(s) for s in segments]
    )
