"""Per-chunk analysis (the map step)."""

from __future__ import annotations

import asyncio
import logging

from ytnotes.concurrency import gather_fail_fast
from ytnotes.extraction.models import PartialResult
from ytnotes.extraction.providers.base import ProviderAdapter
from ytnotes.ingestion.models import Chunk

logger = logging.getLogger(__name__)


async def analyze_chunk(chunk: Chunk, total: int, adapter: ProviderAdapter) -> PartialResult:
    """Extract themes and timestamps from one chunk.

    Title and summary are not requested here; they only make sense for the
    whole transcript. Adapter errors propagate unchanged.
    """
    result = await adapter.analyze_chunk(chunk.text, chunk.index + 1, total)
    return result.model_copy(update={"index": chunk.index})


async def analyze_chunks(
    chunks: list[Chunk],
    adapter: ProviderAdapter,
    max_concurrency: int = 4,
) -> list[PartialResult]:
    """Analyze every chunk with at most *max_concurrency* calls in flight.

    Returns:
        One PartialResult per chunk, in chunk index order.
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

    semaphore = asyncio.Semaphore(max_concurrency)
    total = len(chunks)

    async def _bounded(chunk: Chunk) -> PartialResult:
        async with semaphore:
            logger.info("Processing chunk %d/%d with %s", chunk.index + 1, total, adapter.vendor)
            return await analyze_chunk(chunk, total, adapter)

    results = await gather_fail_fast(*(_bounded(c) for c in chunks))
    return sorted(results, key=lambda r: r.index)
