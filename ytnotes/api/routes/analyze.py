"""Analyze endpoint: run the thematic analysis pipeline over a transcript."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter

from ytnotes.api.models import AnalyzeRequest, AnalyzeResponse
from ytnotes.config import settings
from ytnotes.errors import AnalysisTimeoutError
from ytnotes.pipeline import analyze_transcript

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    """Analyze a transcript with the caller's provider and API key.

    The key is used for this request only. Missing transcript/key or an
    unknown provider is a 400; any provider or aggregation failure is a 502
    and no partial analysis is returned.
    """
    logger.info(
        "Analyze request: %d segments, provider=%s, detail=%s",
        len(request.transcript),
        request.provider,
        request.detail_level.value,
    )
    try:
        analysis = await asyncio.wait_for(
            analyze_transcript(
                [s.to_segment() for s in request.transcript],
                api_key=request.api_key.get_secret_value(),
                provider=request.provider,
                detail_level=request.detail_level,
            ),
            timeout=settings.analysis_timeout_seconds,
        )
    except TimeoutError as exc:
        raise AnalysisTimeoutError(
            f"analysis did not finish within {settings.analysis_timeout_seconds:g} seconds"
        ) from exc

    return AnalyzeResponse(analysis=analysis)
