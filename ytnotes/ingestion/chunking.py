"""Sentence-aligned chunking of transcript text."""

from __future__ import annotations

import re
from collections.abc import Iterable

from ytnotes.errors import EmptyInputError
from ytnotes.ingestion.models import Chunk, TranscriptSegment

_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def join_segments(segments: Iterable[TranscriptSegment]) -> str:
    """Concatenate segment texts with single spaces (the transcript's full text)."""
    return " ".join(s.text for s in segments)


def split_sentences(text: str) -> list[str]:
    """Split on ``.``, ``!`` or ``?`` followed by whitespace.

    The whole whitespace run at a boundary (newlines included) is consumed;
    whitespace inside a sentence is kept as is.
    """
    return [s for s in _SENTENCE_BOUNDARY_RE.split(text) if s]


def chunk_text(text: str, max_chars: int) -> list[Chunk]:
    """Greedily pack whole sentences into chunks of at most *max_chars*.

    Sentences are joined back with a single space, so joining the chunks with
    spaces reproduces *text* only where every sentence boundary was a single
    space. Captions often break lines with ``\\n``; after chunking such a
    boundary reads as one space. A sentence that is longer
    than *max_chars* on its own is never split and becomes an oversized chunk,
    so callers must tolerate chunks above the nominal maximum.

    Args:
        text: Full transcript text.
        max_chars: Nominal maximum chunk length in characters.

    Returns:
        Non-empty chunks in text order, indexed from 0.

    Raises:
        EmptyInputError: If *text* is empty or whitespace only.
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars must be positive, got {max_chars}")
    if not text.strip():
        raise EmptyInputError("Transcript text is empty")

    pieces: list[str] = []
    current = ""
    for sentence in split_sentences(text):
        if not current:
            current = sentence
        elif len(current) + len(sentence) + 1 <= max_chars:
            current = f"{current} {sentence}"
        else:
            pieces.append(current)
            current = sentence

    if current:
        pieces.append(current)

    return [Chunk(index=i, text=piece) for i, piece in enumerate(pieces)]
