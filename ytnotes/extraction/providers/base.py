"""Vendor-neutral provider adapter.

Every analysis call goes through :meth:`ProviderAdapter._request`, which makes
at most two attempts: one asking the vendor for structured (JSON) output and,
only if that does not produce a conforming object, one plain call whose text
is parsed as JSON. Vendors implement a single transport hook, ``_complete``.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ytnotes.errors import MalformedResponseError, ProviderError
from ytnotes.extraction.models import Analysis, ConsolidatedThemes, PartialResult, Theme, TitleSummary
from ytnotes.extraction.prompts import (
    PromptSpec,
    chunk_analysis_prompt,
    consolidation_prompt,
    full_analysis_prompt,
    summary_prompt,
)
from ytnotes.pipeline_config import DetailLevel

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class Attempt:
    """Outcome of one provider call: a decoded JSON object, or why there is none."""

    payload: dict[str, Any] | None = None
    error: ProviderError | MalformedResponseError | None = None


def parse_json_object(vendor: str, text: str) -> Attempt:
    """Decode *text* as a JSON object, tolerating a surrounding markdown code fence."""
    body = text.strip()
    fenced = _CODE_FENCE_RE.match(body)
    if fenced:
        body = fenced.group(1)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        return Attempt(error=MalformedResponseError(vendor, f"invalid JSON ({exc.msg})"))
    if not isinstance(data, dict):
        return Attempt(error=MalformedResponseError(vendor, "expected a JSON object"))
    return Attempt(payload=data)


class ProviderAdapter(ABC):
    """Capability set shared by all LLM vendors.

    Subclasses hold their own SDK client (built from the caller's API key)
    and implement ``_complete``; prompts, validation and the fallback policy
    live here so vendors cannot diverge on the JSON contract.
    """

    vendor: str = ""

    def __init__(self, model: str) -> None:
        self.model = model

    @abstractmethod
    async def _complete(self, prompt: PromptSpec, structured: bool) -> Attempt:
        """Send one request; never raise for vendor/API failures, return them."""

    async def analyze_full(self, text: str, detail_level: DetailLevel) -> Analysis:
        """Title, summary, themes and timestamps for a whole transcript in one call."""
        return await self._request(full_analysis_prompt(text, detail_level), Analysis)

    async def analyze_chunk(self, text: str, ordinal: int, total: int) -> PartialResult:
        """Themes and timestamps for chunk *ordinal* (1-based) of *total*."""
        return await self._request(chunk_analysis_prompt(text, ordinal, total), PartialResult)

    async def summarize(self, themes: list[Theme]) -> TitleSummary:
        """Title and summary for the whole transcript from candidate themes."""
        return await self._request(summary_prompt(themes), TitleSummary)

    async def consolidate(self, themes: list[Theme], detail_level: DetailLevel) -> ConsolidatedThemes:
        """Merge near-duplicate themes and order them by importance."""
        return await self._request(consolidation_prompt(themes, detail_level), ConsolidatedThemes)

    async def _request(self, prompt: PromptSpec, result_type: type[ResultT]) -> ResultT:
        first = self._validate(await self._complete(prompt, structured=True), result_type)
        if isinstance(first, result_type):
            return first

        logger.warning(
            "%s structured output failed for %s (%s); retrying without it",
            self.vendor,
            prompt.name,
            first,
        )
        second = self._validate(await self._complete(prompt, structured=False), result_type)
        if isinstance(second, result_type):
            return second
        raise second

    def _validate(
        self, attempt: Attempt, result_type: type[ResultT]
    ) -> ResultT | ProviderError | MalformedResponseError:
        if attempt.error is not None:
            return attempt.error
        try:
            return result_type.model_validate(attempt.payload)
        except ValidationError as exc:
            missing = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
            return MalformedResponseError(self.vendor, f"missing or invalid fields: {', '.join(missing)}")
