"""End-to-end analysis pipeline: size check -> direct OR chunk -> analyze -> aggregate."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum

from ytnotes.config import settings
from ytnotes.errors import ErrorCode, InputError
from ytnotes.extraction.aggregator import aggregate, cap_themes
from ytnotes.extraction.analyzer import analyze_chunks
from ytnotes.extraction.models import Analysis
from ytnotes.extraction.providers.base import ProviderAdapter
from ytnotes.extraction.providers.registry import get_provider, resolve_provider
from ytnotes.ingestion.chunking import chunk_text, join_segments
from ytnotes.ingestion.models import TranscriptSegment
from ytnotes.pipeline_config import THEME_CAPS, DetailLevel, PipelineConfig, Provider

logger = logging.getLogger(__name__)


def resolve_detail_level(level: str | DetailLevel) -> DetailLevel:
    """Normalise *level* to a :class:`DetailLevel`, rejecting unknown values."""
    try:
        return DetailLevel(level)
    except ValueError:
        raise InputError(f"Invalid detail level: {level!r}", ErrorCode.INVALID_REQUEST) from None


class PipelineStage(StrEnum):
    """Where a pipeline run currently is. ``FAILED`` and ``DONE`` are terminal."""

    IDLE = "idle"
    DIRECT_ANALYZE = "direct_analyze"
    CHUNKING = "chunking"
    CHUNK_ANALYZE = "chunk_analyze"
    AGGREGATE = "aggregate"
    DONE = "done"
    FAILED = "failed"


class AnalysisPipeline:
    """A single, stateless analysis run over one transcript.

    Instances are single-use: the stage only moves forward, and any error
    moves it to ``FAILED`` before propagating unchanged. No partial analysis
    is ever returned.
    """

    def __init__(self, adapter: ProviderAdapter, config: PipelineConfig) -> None:
        self.adapter = adapter
        self.config = config
        self.stage = PipelineStage.IDLE

    def _enter(self, stage: PipelineStage) -> None:
        logger.info("Pipeline %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    async def run(self, segments: Sequence[TranscriptSegment]) -> Analysis:
        if self.stage is not PipelineStage.IDLE:
            raise RuntimeError(f"Pipeline already used (stage={self.stage.value})")
        try:
            analysis = await self._run(segments)
        except BaseException:
            self._enter(PipelineStage.FAILED)
            raise
        self._enter(PipelineStage.DONE)
        return analysis

    async def _run(self, segments: Sequence[TranscriptSegment]) -> Analysis:
        full_text = join_segments(segments)
        logger.info(
            "Analyzing %d segments (%d chars) with %s, detail=%s",
            len(segments),
            len(full_text),
            self.config.provider.value,
            self.config.detail_level.value,
        )

        if len(full_text) <= self.config.threshold:
            self._enter(PipelineStage.DIRECT_ANALYZE)
            analysis = await self.adapter.analyze_full(full_text, self.config.detail_level)
            return analysis.model_copy(
                update={"key_themes": cap_themes(analysis.key_themes, self.config.theme_cap)}
            )

        self._enter(PipelineStage.CHUNKING)
        chunks = chunk_text(full_text, self.config.threshold)
        logger.info(
            "Transcript is large (%d chars), processing in %d chunks", len(full_text), len(chunks)
        )

        self._enter(PipelineStage.CHUNK_ANALYZE)
        partials = await analyze_chunks(chunks, self.adapter, self.config.max_concurrency)

        self._enter(PipelineStage.AGGREGATE)
        return await aggregate(
            partials, self.config.detail_level, self.adapter, theme_cap=self.config.theme_cap
        )


async def analyze_transcript(
    segments: Sequence[TranscriptSegment],
    api_key: str,
    provider: str | Provider = Provider.OPENAI,
    detail_level: str | DetailLevel = DetailLevel.MEDIUM,
    threshold: int | None = None,
    max_concurrency: int | None = None,
) -> Analysis:
    """Analyze a transcript with the chosen provider.

    Inputs are validated before any provider call is made.

    Args:
        segments: Transcript segments in playback order.
        api_key: The caller's key for *provider*; used for this run only.
        provider: ``"openai"`` or ``"anthropic"``.
        detail_level: ``"low"``, ``"medium"`` or ``"high"``.
        threshold: Character count above which the transcript is chunked.
            Defaults to ``settings.chunk_threshold_chars``.
        max_concurrency: Maximum in-flight chunk calls.
            Defaults to ``settings.max_concurrency``.

    Returns:
        The complete Analysis.

    Raises:
        InputError: Missing transcript or key, unsupported provider, or
            unknown detail level.
        ProviderError, MalformedResponseError, AggregationError: On any
            analysis failure (fail-fast).
    """
    if not segments:
        raise InputError("No transcript provided", ErrorCode.MISSING_TRANSCRIPT)
    if not api_key:
        raise InputError("API key is required", ErrorCode.MISSING_API_KEY)
    resolved = resolve_provider(provider)
    level = resolve_detail_level(detail_level)

    config = PipelineConfig(
        provider=resolved,
        detail_level=level,
        threshold=settings.chunk_threshold_chars if threshold is None else threshold,
        max_concurrency=settings.max_concurrency if max_concurrency is None else max_concurrency,
        theme_cap=THEME_CAPS[level] if settings.enforce_theme_cap else None,
    )
    pipeline = AnalysisPipeline(get_provider(resolved, api_key), config)
    return await pipeline.run(segments)
