"""Tests for the chunk analyzer (map) and aggregator (reduce)."""

from __future__ import annotations

import asyncio

import pytest
from conftest import StubProvider, malformed_error, provider_error

from ytnotes.errors import AggregationError, MalformedResponseError, ProviderError
from ytnotes.extraction.aggregator import aggregate, cap_themes, combine_partials
from ytnotes.extraction.analyzer import analyze_chunk, analyze_chunks
from ytnotes.extraction.models import PartialResult, Theme, Timestamp
from ytnotes.ingestion.models import Chunk
from ytnotes.pipeline_config import DetailLevel


def _chunks(n: int) -> list[Chunk]:
    return [Chunk(index=i, text=f"Chunk {i} text.") for i in range(n)]


def _partial(index: int, themes: list[str], times: list[str]) -> PartialResult:
    return PartialResult(
        key_themes=[Theme(name=t) for t in themes],
        timestamps=[Timestamp(time=t, description=f"at {t}") for t in times],
        index=index,
    )


# ---------------------------------------------------------------------------
# Chunk analyzer
# ---------------------------------------------------------------------------


class TestAnalyzeChunk:
    def test_passes_one_based_ordinal_and_total(self, stub_provider: StubProvider) -> None:
        """The adapter sees a 1-based ordinal; the result keeps the 0-based index."""
        result = asyncio.run(analyze_chunk(Chunk(index=2, text="abc"), 5, stub_provider))
        assert stub_provider.calls == [("analyze_chunk", 3, 5, 3)]
        assert result.index == 2

    def test_errors_propagate_unchanged(self) -> None:
        """Adapter errors reach the caller as the same object."""
        error = provider_error(429)
        provider = StubProvider(fail={"analyze_chunk": error})
        with pytest.raises(ProviderError) as exc_info:
            asyncio.run(analyze_chunk(Chunk(index=0, text="abc"), 1, provider))
        assert exc_info.value is error

    def test_index_is_not_serialized(self, stub_provider: StubProvider) -> None:
        """The chunk index is bookkeeping and never appears in JSON."""
        result = asyncio.run(analyze_chunk(Chunk(index=4, text="abc"), 5, stub_provider))
        assert set(result.model_dump(by_alias=True)) == {"keyThemes", "timestamps"}


class TestAnalyzeChunks:
    def test_results_come_back_in_chunk_order(self) -> None:
        """Later chunks finish first; results are still ordered by index."""
        provider = StubProvider(chunk_delay=lambda ordinal, total: (total - ordinal) * 0.01)

        results = asyncio.run(analyze_chunks(_chunks(5), provider, max_concurrency=5))

        assert [r.index for r in results] == [0, 1, 2, 3, 4]
        assert [r.timestamps[0].time for r in results] == ["01:00", "02:00", "03:00", "04:00", "05:00"]

    def test_concurrency_is_bounded(self) -> None:
        """No more than max_concurrency chunk calls are in flight."""
        provider = StubProvider(chunk_delay=lambda ordinal, total: 0.01)
        asyncio.run(analyze_chunks(_chunks(8), provider, max_concurrency=3))
        assert 1 <= provider.max_in_flight <= 3
        assert len(provider.calls) == 8

    def test_sequential_when_limit_is_one(self) -> None:
        """A limit of one processes chunks strictly in order."""
        provider = StubProvider(chunk_delay=lambda ordinal, total: 0.001)
        asyncio.run(analyze_chunks(_chunks(4), provider, max_concurrency=1))
        assert provider.max_in_flight == 1
        assert [c[1] for c in provider.calls] == [1, 2, 3, 4]

    def test_first_failure_cancels_in_flight_chunks(self) -> None:
        """The first failing chunk cancels the chunks still running."""
        provider = StubProvider(
            fail={"analyze_chunk": provider_error(500)},
            fail_ordinal=1,
            chunk_delay=lambda ordinal, total: 0 if ordinal == 1 else 5,
        )

        with pytest.raises(ProviderError):
            asyncio.run(analyze_chunks(_chunks(3), provider, max_concurrency=3))

        assert sorted(provider.cancelled) == ["analyze_chunk:2", "analyze_chunk:3"]

    def test_invalid_limit(self, stub_provider: StubProvider) -> None:
        """A limit below one is rejected."""
        with pytest.raises(ValueError):
            asyncio.run(analyze_chunks(_chunks(1), stub_provider, max_concurrency=0))


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------


class TestCombinePartials:
    def test_concatenates_in_chunk_order(self) -> None:
        """Themes and timestamps are concatenated by chunk index, not list order."""
        partials = [
            _partial(1, ["B1"], ["10:00", "11:00"]),
            _partial(0, ["A1", "A2"], ["00:10"]),
            _partial(2, [], ["20:00"]),
        ]

        themes, timestamps = combine_partials(partials)

        assert [t.name for t in themes] == ["A1", "A2", "B1"]
        assert [t.time for t in timestamps] == ["00:10", "10:00", "11:00", "20:00"]

    def test_duplicate_timestamps_are_kept(self) -> None:
        """Identical timestamps from different chunks are both kept."""
        partials = [_partial(0, [], ["05:00"]), _partial(1, [], ["05:00"])]
        _, timestamps = combine_partials(partials)
        assert len(timestamps) == 2


class TestAggregate:
    def test_assembles_analysis(self, stub_provider: StubProvider) -> None:
        """Title and summary come from summarize, themes from consolidate."""
        partials = [_partial(0, ["A", "B"], ["00:30"]), _partial(1, ["C"], ["09:00"])]

        analysis = asyncio.run(aggregate(partials, DetailLevel.HIGH, stub_provider))

        assert analysis.title == "Aggregated title"
        assert analysis.summary == "Built from 3 themes."
        assert [t.name for t in analysis.key_themes] == ["A", "B", "C"]
        assert [t.time for t in analysis.timestamps] == ["00:30", "09:00"]
        assert sorted(stub_provider.operations()) == ["consolidate", "summarize"]

    def test_timestamps_are_verbatim(self, stub_provider: StubProvider) -> None:
        """Timestamps pass through aggregation without any rewriting."""
        original = Timestamp(time="1:02:03", description="  odd  spacing kept ")
        partials = [PartialResult(key_themes=[], timestamps=[original], index=0)]

        analysis = asyncio.run(aggregate(partials, DetailLevel.MEDIUM, stub_provider))

        assert analysis.timestamps == [original]

    def test_rerun_yields_identical_timestamps(self) -> None:
        """Aggregating the same partials twice gives the same timestamps."""
        partials = [_partial(i, [f"T{i}"], [f"{i:02d}:00", f"{i:02d}:30"]) for i in range(4)]

        first = asyncio.run(aggregate(partials, DetailLevel.MEDIUM, StubProvider()))
        second = asyncio.run(aggregate(partials, DetailLevel.MEDIUM, StubProvider()))

        assert first.timestamps == second.timestamps

    def test_detail_level_monotonicity(self) -> None:
        """Higher detail levels never yield fewer themes."""
        partials = [_partial(0, ["A", "B", "C", "D"], ["00:00"])]
        counts = {
            level: len(asyncio.run(aggregate(partials, level, StubProvider())).key_themes)
            for level in DetailLevel
        }
        assert counts[DetailLevel.LOW] <= counts[DetailLevel.MEDIUM] <= counts[DetailLevel.HIGH]

    def test_consolidate_receives_all_candidate_themes(self, stub_provider: StubProvider) -> None:
        """Both reduce calls see every candidate theme."""
        partials = [_partial(0, ["A", "B"], []), _partial(1, ["C", "D"], [])]
        asyncio.run(aggregate(partials, DetailLevel.LOW, stub_provider))
        assert ("consolidate", 4, DetailLevel.LOW) in stub_provider.calls
        assert ("summarize", 4) in stub_provider.calls

    def test_summarize_failure_wraps_and_cancels_consolidate(self) -> None:
        """A failed summarize is wrapped with its step and cancels consolidate."""
        cause = provider_error(502)
        provider = StubProvider(fail={"summarize": cause}, step_delay=5)

        with pytest.raises(AggregationError) as exc_info:
            asyncio.run(aggregate([_partial(0, ["A"], [])], DetailLevel.MEDIUM, provider))

        assert exc_info.value.step == "summarize"
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert provider.cancelled == ["consolidate"]

    def test_consolidate_malformed_wraps(self) -> None:
        """A malformed consolidate reply is wrapped as an aggregation error."""
        provider = StubProvider(fail={"consolidate": malformed_error()})

        with pytest.raises(AggregationError) as exc_info:
            asyncio.run(aggregate([_partial(0, ["A"], [])], DetailLevel.MEDIUM, provider))

        assert exc_info.value.step == "consolidate"
        assert isinstance(exc_info.value.cause, MalformedResponseError)

    def test_theme_cap_keeps_most_important(self, stub_provider: StubProvider) -> None:
        """The cap keeps the leading, most important themes."""
        partials = [_partial(0, ["A", "B", "C"], [])]
        analysis = asyncio.run(aggregate(partials, DetailLevel.HIGH, stub_provider, theme_cap=2))
        assert [t.name for t in analysis.key_themes] == ["A", "B"]


class TestCapThemes:
    def test_no_cap(self) -> None:
        """Without a cap every theme is kept."""
        themes = [Theme(name=str(i)) for i in range(3)]
        assert cap_themes(themes, None) == themes

    def test_cap_above_length(self) -> None:
        """A cap larger than the list changes nothing."""
        themes = [Theme(name="only")]
        assert cap_themes(themes, 5) == themes
