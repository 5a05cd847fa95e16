"""Markdown rendering of an Analysis."""

from __future__ import annotations

import re

from ytnotes.extraction.models import Analysis

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_FILENAME_RE = re.compile(r"[^a-z0-9._-]")


def render_markdown(analysis: Analysis) -> str:
    """Render an analysis as a markdown document (title, summary, themes, timestamps)."""
    lines: list[str] = [f"# {analysis.title}", "", "## Summary", analysis.summary, "", "## Key Themes"]

    for theme in analysis.key_themes:
        lines += ["", f"### {theme.name}", theme.description, ""]
        lines += [f"- {point}" for point in theme.points]

    lines += ["", "## Timestamps"]
    lines += [f"- {ts.time}: {ts.description}" for ts in analysis.timestamps]
    return "\n".join(lines) + "\n"


def export_filename(analysis: Analysis) -> str:
    """File name for a downloaded analysis, e.g. ``my-video-title.md``."""
    slug = _WHITESPACE_RE.sub("-", analysis.title.strip()).lower()
    # Header-safe: Content-Disposition values must be latin-1.
    slug = _UNSAFE_FILENAME_RE.sub("", slug)
    return f"{slug or 'analysis'}.md"
