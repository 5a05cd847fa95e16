"""Shared fixtures: deterministic provider stubs and transcript builders."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from ytnotes.api.main import app
from ytnotes.errors import MalformedResponseError, ProviderError
from ytnotes.extraction.models import (
    Analysis,
    ConsolidatedThemes,
    PartialResult,
    Theme,
    Timestamp,
    TitleSummary,
)
from ytnotes.extraction.prompts import PromptSpec
from ytnotes.extraction.providers.base import Attempt, ProviderAdapter
from ytnotes.ingestion.models import TranscriptSegment
from ytnotes.pipeline_config import DetailLevel

# Sentence of exactly 52 characters; 4717 of them joined by spaces is 250,000 chars.
SENTENCE_52 = "a" * 51 + "."
SENTENCES_FOR_250K = 4717

CONSOLIDATED_COUNTS: dict[DetailLevel, int] = {
    DetailLevel.LOW: 1,
    DetailLevel.MEDIUM: 2,
    DetailLevel.HIGH: 3,
}


class StubProvider(ProviderAdapter):
    """Deterministic in-process provider that records every call.

    ``analyze_chunk`` returns ``themes_per_chunk`` themes and
    ``timestamps_per_chunk`` timestamps per chunk; ``consolidate`` keeps
    1/2/3 themes for low/medium/high. ``fail`` maps an operation name to the
    exception it should raise (``analyze_chunk`` failures can be limited to
    one ordinal with ``fail_ordinal``).
    """

    vendor = "stub"

    def __init__(
        self,
        themes_per_chunk: int = 2,
        timestamps_per_chunk: int = 1,
        fail: dict[str, Exception] | None = None,
        fail_ordinal: int | None = None,
        chunk_delay: Callable[[int, int], float] | None = None,
        step_delay: float = 0.0,
    ) -> None:
        super().__init__("stub-model")
        self.themes_per_chunk = themes_per_chunk
        self.timestamps_per_chunk = timestamps_per_chunk
        self.fail = fail or {}
        self.fail_ordinal = fail_ordinal
        self.chunk_delay = chunk_delay
        self.step_delay = step_delay
        self.calls: list[tuple[object, ...]] = []
        self.cancelled: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _complete(self, prompt: PromptSpec, structured: bool) -> Attempt:
        raise AssertionError("StubProvider overrides every operation")

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail:
            raise self.fail[operation]

    async def analyze_full(self, text: str, detail_level: DetailLevel) -> Analysis:
        self.calls.append(("analyze_full", len(text), DetailLevel(detail_level)))
        self._maybe_fail("analyze_full")
        if self.step_delay:
            await asyncio.sleep(self.step_delay)
        return Analysis(
            title="Direct title",
            summary="Direct summary.",
            key_themes=[Theme(name=f"Direct theme {i}") for i in range(5)],
            timestamps=[Timestamp(time="00:00", description="Intro")],
        )

    async def analyze_chunk(self, text: str, ordinal: int, total: int) -> PartialResult:
        self.calls.append(("analyze_chunk", ordinal, total, len(text)))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.chunk_delay is not None:
                await asyncio.sleep(self.chunk_delay(ordinal, total))
            if "analyze_chunk" in self.fail and self.fail_ordinal in (None, ordinal):
                raise self.fail["analyze_chunk"]
            return PartialResult(
                key_themes=[
                    Theme(name=f"Chunk {ordinal} theme {i}", description="d", points=["p"])
                    for i in range(self.themes_per_chunk)
                ],
                timestamps=[
                    Timestamp(time=f"{ordinal:02d}:{i:02d}", description=f"Chunk {ordinal} moment {i}")
                    for i in range(self.timestamps_per_chunk)
                ],
            )
        except asyncio.CancelledError:
            self.cancelled.append(f"analyze_chunk:{ordinal}")
            raise
        finally:
            self.in_flight -= 1

    async def summarize(self, themes: list[Theme]) -> TitleSummary:
        self.calls.append(("summarize", len(themes)))
        self._maybe_fail("summarize")
        return TitleSummary(title="Aggregated title", summary=f"Built from {len(themes)} themes.")

    async def consolidate(self, themes: list[Theme], detail_level: DetailLevel) -> ConsolidatedThemes:
        self.calls.append(("consolidate", len(themes), DetailLevel(detail_level)))
        try:
            if self.step_delay:
                await asyncio.sleep(self.step_delay)
        except asyncio.CancelledError:
            self.cancelled.append("consolidate")
            raise
        self._maybe_fail("consolidate")
        keep = CONSOLIDATED_COUNTS[DetailLevel(detail_level)]
        return ConsolidatedThemes(key_themes=themes[:keep])

    def operations(self) -> list[object]:
        return [call[0] for call in self.calls]


class ScriptedProvider(ProviderAdapter):
    """Provider whose transport returns pre-scripted attempts, in order."""

    vendor = "scripted"

    def __init__(self, attempts: list[Attempt]) -> None:
        super().__init__("scripted-model")
        self.attempts = list(attempts)
        self.structured_flags: list[bool] = []
        self.prompts: list[PromptSpec] = []

    async def _complete(self, prompt: PromptSpec, structured: bool) -> Attempt:
        self.structured_flags.append(structured)
        self.prompts.append(prompt)
        return self.attempts.pop(0)


def provider_error(status: int = 500, vendor: str = "stub") -> ProviderError:
    return ProviderError(vendor, "upstream exploded", status)


def malformed_error(vendor: str = "stub") -> MalformedResponseError:
    return MalformedResponseError(vendor, "invalid JSON")


def segments_from_text(*texts: str) -> list[TranscriptSegment]:
    return [TranscriptSegment(text=t, offset=float(i), duration=1.0) for i, t in enumerate(texts)]


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def long_segments() -> list[TranscriptSegment]:
    """Segments whose joined text is exactly 250,000 characters."""
    return segments_from_text(*([SENTENCE_52] * SENTENCES_FOR_250K))


@pytest.fixture
def short_segments() -> list[TranscriptSegment]:
    return segments_from_text("Welcome to the show.", "Today we talk about bread.", "Goodbye!")


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def client_no_raise() -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
