"""Merge per-chunk results into one Analysis (the reduce step)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from ytnotes.concurrency import gather_fail_fast
from ytnotes.errors import AggregationError, MalformedResponseError, ProviderError
from ytnotes.extraction.models import (
    Analysis,
    ConsolidatedThemes,
    PartialResult,
    Theme,
    Timestamp,
    TitleSummary,
)
from ytnotes.extraction.providers.base import ProviderAdapter
from ytnotes.pipeline_config import DetailLevel

logger = logging.getLogger(__name__)

T = TypeVar("T")


def combine_partials(partials: list[PartialResult]) -> tuple[list[Theme], list[Timestamp]]:
    """Concatenate themes and timestamps across chunks, in chunk index order."""
    themes: list[Theme] = []
    timestamps: list[Timestamp] = []
    for partial in sorted(partials, key=lambda p: p.index):
        themes.extend(partial.key_themes)
        timestamps.extend(partial.timestamps)
    return themes, timestamps


def cap_themes(themes: list[Theme], theme_cap: int | None) -> list[Theme]:
    """Keep the first *theme_cap* themes; themes arrive in importance order."""
    if theme_cap is None or len(themes) <= theme_cap:
        return list(themes)
    logger.info("Capping %d consolidated themes at %d", len(themes), theme_cap)
    return list(themes[:theme_cap])


async def _step(name: str, call: Awaitable[T]) -> T:
    try:
        return await call
    except (ProviderError, MalformedResponseError) as exc:
        logger.warning("Aggregation step %s failed: %s", name, exc.message)
        raise AggregationError(name, exc) from exc


async def aggregate(
    partials: list[PartialResult],
    detail_level: DetailLevel,
    adapter: ProviderAdapter,
    theme_cap: int | None = None,
) -> Analysis:
    """Build the final Analysis from chunk results.

    Summarize and consolidate are independent LLM calls over the same
    candidate themes, so they run concurrently. Timestamps are never sent to
    the model again: they are the concatenation of the chunk timestamps.

    Args:
        partials: One result per chunk.
        detail_level: Steers how aggressively themes are merged.
        adapter: Provider used for both calls.
        theme_cap: If set, keep only the first (most important) N themes.

    Raises:
        AggregationError: If either call fails; nothing is salvaged.
    """
    candidate_themes, timestamps = combine_partials(partials)
    logger.info(
        "Aggregating %d candidate themes and %d timestamps from %d chunks",
        len(candidate_themes),
        len(timestamps),
        len(partials),
    )

    heading: TitleSummary
    consolidated: ConsolidatedThemes
    heading, consolidated = await gather_fail_fast(
        _step("summarize", adapter.summarize(candidate_themes)),
        _step("consolidate", adapter.consolidate(candidate_themes, detail_level)),
    )

    return Analysis(
        title=heading.title,
        summary=heading.summary,
        key_themes=cap_themes(consolidated.key_themes, theme_cap),
        timestamps=timestamps,
    )
