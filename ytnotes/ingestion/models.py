"""Data models for transcript ingestion and chunking."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TranscriptSegment:
    """One caption unit, in playback order."""

    text: str
    offset: float = 0.0  # start offset in seconds
    duration: float = 0.0


@dataclass(frozen=True)
class Chunk:
    """A sentence-aligned slice of the full transcript text."""

    index: int
    text: str
