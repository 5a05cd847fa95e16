"""YouTube video-id extraction and caption fetching."""

from __future__ import annotations

import logging
import re

from youtube_transcript_api import (
    NoTranscriptFound,
    TranscriptsDisabled,
    YouTubeTranscriptApi,
)

from ytnotes.errors import ErrorCode, TranscriptFetchError
from ytnotes.ingestion.models import TranscriptSegment

logger = logging.getLogger(__name__)

# Same pattern the browser client uses, so both sides agree on what a valid URL is.
_VIDEO_ID_RE = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
VIDEO_ID_LENGTH = 11


def extract_video_id(url: str) -> str | None:
    """Return the 11-character video id embedded in *url*, or None."""
    match = _VIDEO_ID_RE.match(url or "")
    if match and len(match.group(2)) == VIDEO_ID_LENGTH:
        return match.group(2)
    return None


def fetch_transcript(
    video_url: str,
    client: YouTubeTranscriptApi | None = None,
) -> list[TranscriptSegment]:
    """Fetch the captions of a YouTube video as transcript segments.

    This is a blocking network call; async callers should run it in a thread.

    Args:
        video_url: Any URL shape accepted by :func:`extract_video_id`.
        client: Optional pre-built API client (tests inject a mock).

    Returns:
        Segments in playback order.

    Raises:
        TranscriptFetchError: ``InvalidUrl`` if no video id can be extracted,
            ``NotFound`` if the video has no usable captions, and
            ``UpstreamFailure`` for anything else.
    """
    video_id = extract_video_id(video_url)
    if video_id is None:
        raise TranscriptFetchError("Invalid YouTube URL", ErrorCode.INVALID_URL)

    api = client or YouTubeTranscriptApi()
    try:
        fetched = api.fetch(video_id)
    except (TranscriptsDisabled, NoTranscriptFound) as exc:
        raise TranscriptFetchError(
            "No transcript found for this video", ErrorCode.NOT_FOUND
        ) from exc
    except Exception as exc:
        # Rate limiting, unavailable video, network failure: not the caller's fault.
        logger.warning("Transcript fetch failed for video %s: %s", video_id, exc.__class__.__name__)
        raise TranscriptFetchError("Failed to fetch transcript") from exc

    segments = [
        TranscriptSegment(text=snippet.text, offset=snippet.start, duration=snippet.duration)
        for snippet in fetched
    ]
    if not segments:
        raise TranscriptFetchError("No transcript found for this video", ErrorCode.NOT_FOUND)

    logger.info("Fetched %d transcript segments for video %s", len(segments), video_id)
    return segments
