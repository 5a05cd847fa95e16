"""Pydantic request/response schemas for the YouTube Notes API.

Wire names are camelCase to match the browser client.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from ytnotes.errors import ErrorCode
from ytnotes.extraction.models import Analysis
from ytnotes.ingestion.models import TranscriptSegment
from ytnotes.pipeline_config import DetailLevel


class TranscriptRequest(BaseModel):
    """Request body for the /api/transcript endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    video_url: str = Field(default="", alias="videoUrl")


class TranscriptSegmentModel(BaseModel):
    """One caption unit; ``offset`` and ``duration`` are in seconds."""

    text: str
    offset: float = 0.0
    duration: float = 0.0

    @classmethod
    def from_segment(cls, segment: TranscriptSegment) -> TranscriptSegmentModel:
        return cls(text=segment.text, offset=segment.offset, duration=segment.duration)

    def to_segment(self) -> TranscriptSegment:
        return TranscriptSegment(text=self.text, offset=self.offset, duration=self.duration)


class TranscriptResponse(BaseModel):
    """Response body for the /api/transcript endpoint."""

    transcript: list[TranscriptSegmentModel]


class AnalyzeRequest(BaseModel):
    """Request body for the /api/analyze endpoint.

    ``transcript`` and ``apiKey`` default to empty so that omitting them is
    reported as MissingTranscript / MissingApiKey rather than a schema error.
    ``provider`` stays a plain string for the same reason.
    """

    model_config = ConfigDict(populate_by_name=True)

    transcript: list[TranscriptSegmentModel] = []
    api_key: SecretStr = Field(default=SecretStr(""), alias="apiKey")
    provider: str = "openai"
    detail_level: DetailLevel = Field(default=DetailLevel.MEDIUM, alias="detailLevel")


class AnalyzeResponse(BaseModel):
    """Response body for the /api/analyze endpoint."""

    analysis: Analysis


class ExportRequest(BaseModel):
    """Request body for the /api/export endpoint."""

    analysis: Analysis


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
    code: ErrorCode
