"""Pydantic models for LLM analysis results.

Field aliases carry the JSON names the prompts ask for (``keyThemes``,
``theme``); those names are shared with the UI and must not drift.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Contract(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Theme(_Contract):
    """A named topical cluster with supporting points."""

    name: str = Field(alias="theme")
    description: str = ""
    points: list[str] = []


class Timestamp(_Contract):
    """A highlighted moment; passed through aggregation untouched."""

    time: str
    description: str


class PartialResult(_Contract):
    """Themes and timestamps extracted from a single chunk."""

    key_themes: list[Theme] = Field(alias="keyThemes")
    timestamps: list[Timestamp]
    # Chunk position within the run; set by the chunk analyzer, never serialized.
    index: int = Field(default=0, exclude=True)


class TitleSummary(_Contract):
    """Whole-transcript title and summary produced from candidate themes."""

    title: str
    summary: str


class ConsolidatedThemes(_Contract):
    """De-duplicated, importance-ordered themes."""

    key_themes: list[Theme] = Field(alias="keyThemes")


class Analysis(_Contract):
    """Final structured analysis of a transcript."""

    title: str
    summary: str
    key_themes: list[Theme] = Field(alias="keyThemes")
    timestamps: list[Timestamp]

    def to_json_dict(self) -> dict:  # type: ignore[type-arg]
        """Serialize with the contract's JSON field names."""
        return self.model_dump(by_alias=True)
