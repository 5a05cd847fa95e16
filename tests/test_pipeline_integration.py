"""End-to-end integration test against live services.

# MANUAL RUN REQUIRED: these tests call YouTube and a real LLM vendor.
# Run manually with: pytest -m expensive tests/test_pipeline_integration.py -v
# Needs OPENAI_API_KEY and/or ANTHROPIC_API_KEY in the environment.
#
# These tests are NOT run in CI (marked @pytest.mark.expensive).
"""

from __future__ import annotations

import asyncio
import os

import pytest

from ytnotes.ingestion.youtube import fetch_transcript
from ytnotes.pipeline import analyze_transcript
from ytnotes.pipeline_config import DetailLevel, Provider

# A short public talk with English captions.
VIDEO_URL = "https://www.youtube.com/watch?v=8S0FDjFBj8o"

KEY_ENV = {Provider.OPENAI: "OPENAI_API_KEY", Provider.ANTHROPIC: "ANTHROPIC_API_KEY"}


@pytest.mark.expensive
@pytest.mark.parametrize("provider", list(Provider))
def test_live_analysis(provider: Provider) -> None:
    """Fetch and analyze a real video with each configured provider."""
    api_key = os.getenv(KEY_ENV[provider])
    if not api_key:
        pytest.skip(f"{KEY_ENV[provider]} not set")

    segments = fetch_transcript(VIDEO_URL)
    assert segments

    analysis = asyncio.run(analyze_transcript(segments, api_key, provider, DetailLevel.LOW))

    assert analysis.title
    assert analysis.summary
    assert analysis.key_themes


@pytest.mark.expensive
def test_live_chunked_analysis() -> None:
    """Force the chunked path with a small threshold."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        pytest.skip("OPENAI_API_KEY not set")

    segments = fetch_transcript(VIDEO_URL)
    analysis = asyncio.run(
        analyze_transcript(segments, api_key, Provider.OPENAI, DetailLevel.MEDIUM, threshold=2_000)
    )

    assert analysis.title
    assert analysis.key_themes
