"""Prompt text and JSON schemas for every analysis call.

Each prompt quotes the exact JSON shape it expects back. The same shapes are
expressed as JSON Schema for providers that accept a schema (Anthropic tool
input), so structured and fallback calls ask for the same object.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ytnotes.extraction.models import Theme
from ytnotes.pipeline_config import THEME_CAPS, DetailLevel

# ---------------------------------------------------------------------------
# JSON shapes quoted in prompts
# ---------------------------------------------------------------------------

_THEMES_SHAPE = """\
  "keyThemes": [
    {
      "theme": "Theme name",
      "description": "Brief description of this theme",
      "points": ["Important point 1", "Important point 2"]
    }
  ]"""

_TIMESTAMPS_SHAPE = """\
  "timestamps": [
    {
      "time": "Approximate timestamp in the video (mm:ss or hh:mm:ss)",
      "description": "What happens at this timestamp"
    }
  ]"""

_TITLE_SUMMARY_SHAPE = (
    '  "title": "Suggested title based on content",\n'
    '  "summary": "A concise 2-3 sentence summary of the video"'
)

FULL_ANALYSIS_SHAPE = "{\n" + _TITLE_SUMMARY_SHAPE + ",\n" + _THEMES_SHAPE + ",\n" + _TIMESTAMPS_SHAPE + "\n}"
PARTIAL_SHAPE = "{\n" + _THEMES_SHAPE + ",\n" + _TIMESTAMPS_SHAPE + "\n}"
TITLE_SUMMARY_SHAPE = "{\n" + _TITLE_SUMMARY_SHAPE + "\n}"
CONSOLIDATED_SHAPE = "{\n" + _THEMES_SHAPE + "\n}"

# ---------------------------------------------------------------------------
# JSON schemas (structured output)
# ---------------------------------------------------------------------------

_THEME_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "theme": {"type": "string", "description": "Theme name."},
        "description": {"type": "string", "description": "Brief description of this theme."},
        "points": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Important points supporting the theme.",
        },
    },
    "required": ["theme", "description", "points"],
}

_TIMESTAMP_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "time": {
            "type": "string",
            "description": "Approximate timestamp in the video, mm:ss or hh:mm:ss.",
        },
        "description": {"type": "string", "description": "What happens at this timestamp."},
    },
    "required": ["time", "description"],
}

_THEMES_PROPERTY: dict[str, Any] = {"type": "array", "items": _THEME_SCHEMA}
_TIMESTAMPS_PROPERTY: dict[str, Any] = {"type": "array", "items": _TIMESTAMP_SCHEMA}

FULL_ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "summary": {"type": "string"},
        "keyThemes": _THEMES_PROPERTY,
        "timestamps": _TIMESTAMPS_PROPERTY,
    },
    "required": ["title", "summary", "keyThemes", "timestamps"],
}

PARTIAL_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"keyThemes": _THEMES_PROPERTY, "timestamps": _TIMESTAMPS_PROPERTY},
    "required": ["keyThemes", "timestamps"],
}

TITLE_SUMMARY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"title": {"type": "string"}, "summary": {"type": "string"}},
    "required": ["title", "summary"],
}

CONSOLIDATED_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"keyThemes": _THEMES_PROPERTY},
    "required": ["keyThemes"],
}

# ---------------------------------------------------------------------------
# System messages
# ---------------------------------------------------------------------------

ANALYSIS_SYSTEM_PROMPT = (
    "You are a helpful assistant that analyzes YouTube video transcripts and "
    "extracts key themes and important points. Always respond with valid JSON."
)

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant that summarizes content based on extracted "
    "themes. Always respond with valid JSON."
)

CONSOLIDATION_SYSTEM_PROMPT = (
    "You are a helpful assistant that consolidates and organizes themes from "
    "content analysis. Always respond with valid JSON."
)


@dataclass(frozen=True)
class PromptSpec:
    """Everything a provider needs to make one analysis call."""

    name: str  # also the Anthropic tool name
    system: str
    user: str
    schema: dict[str, Any]


def detail_directive(detail_level: DetailLevel) -> str:
    """Sentence steering how many themes to produce."""
    level = DetailLevel(detail_level)
    return (
        f"Adjust the detail level to be {level.value} (low = fewer, broader themes, "
        f"high = more, finer-grained themes); produce at most {THEME_CAPS[level]} themes."
    )


def _themes_json(themes: list[Theme]) -> str:
    return json.dumps([t.model_dump(by_alias=True) for t in themes], ensure_ascii=False)


def full_analysis_prompt(text: str, detail_level: DetailLevel) -> PromptSpec:
    """Single-call analysis of a transcript small enough to send whole."""
    user = (
        "Analyze the following YouTube video transcript and extract key themes, "
        "topics, and important points.\n"
        f"{detail_directive(detail_level)}\n"
        "Format the output as JSON with the following structure:\n"
        f"{FULL_ANALYSIS_SHAPE}\n\n"
        f"Transcript:\n{text}"
    )
    return PromptSpec("record_analysis", ANALYSIS_SYSTEM_PROMPT, user, FULL_ANALYSIS_SCHEMA)


def chunk_analysis_prompt(text: str, ordinal: int, total: int) -> PromptSpec:
    """Themes and timestamps for part *ordinal* (1-based) of *total*."""
    user = (
        f"Analyze the following part ({ordinal}/{total}) of a YouTube video transcript "
        "and extract key themes, topics, and important points.\n"
        "Format the output as JSON with the following structure:\n"
        f"{PARTIAL_SHAPE}\n\n"
        f"Transcript part {ordinal}/{total}:\n{text}"
    )
    return PromptSpec("record_chunk_analysis", ANALYSIS_SYSTEM_PROMPT, user, PARTIAL_SCHEMA)


def summary_prompt(themes: list[Theme]) -> PromptSpec:
    """Title and summary for the whole video from the candidate themes."""
    user = (
        "Based on the following themes extracted from a YouTube video, create a "
        "title and summary for the video.\n\n"
        f"Themes:\n{_themes_json(themes)}\n\n"
        "Format the output as JSON with the following structure:\n"
        f"{TITLE_SUMMARY_SHAPE}"
    )
    return PromptSpec("record_summary", SUMMARY_SYSTEM_PROMPT, user, TITLE_SUMMARY_SCHEMA)


def consolidation_prompt(themes: list[Theme], detail_level: DetailLevel) -> PromptSpec:
    """Merge near-duplicate themes and order them by importance."""
    user = (
        "Consolidate these themes from a YouTube video by merging similar ones and "
        "organizing them in order of importance.\n"
        f"{detail_directive(detail_level)}\n\n"
        f"Themes:\n{_themes_json(themes)}\n\n"
        "Format the output as JSON with the following structure:\n"
        f"{CONSOLIDATED_SHAPE}"
    )
    return PromptSpec(
        "record_consolidated_themes", CONSOLIDATION_SYSTEM_PROMPT, user, CONSOLIDATED_SCHEMA
    )
