"""Pipeline configuration: provider/detail enums and PipelineConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Provider(StrEnum):
    """LLM vendors an analysis can be delegated to."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class DetailLevel(StrEnum):
    """How many themes the consolidation step should aim for."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Upper bound on consolidated themes per detail level, applied only when
# ``settings.enforce_theme_cap`` is on. Also quoted to the model as guidance.
THEME_CAPS: dict[DetailLevel, int] = {
    DetailLevel.LOW: 5,
    DetailLevel.MEDIUM: 8,
    DetailLevel.HIGH: 12,
}


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable per-run configuration for the analysis pipeline.

    ``threshold`` is the character count above which the transcript is
    chunked; ``max_concurrency`` bounds in-flight per-chunk provider calls.
    """

    provider: Provider = Provider.OPENAI
    detail_level: DetailLevel = DetailLevel.MEDIUM
    threshold: int = 100_000
    max_concurrency: int = 4
    theme_cap: int | None = None
