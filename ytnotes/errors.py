"""Error taxonomy shared by the pipeline, the CLI and the HTTP layer."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable error codes surfaced to callers."""

    INVALID_URL = "InvalidUrl"
    NOT_FOUND = "NotFound"
    UPSTREAM_FAILURE = "UpstreamFailure"
    MISSING_TRANSCRIPT = "MissingTranscript"
    MISSING_API_KEY = "MissingApiKey"
    UNSUPPORTED_PROVIDER = "UnsupportedProvider"
    ANALYSIS_FAILURE = "AnalysisFailure"
    INVALID_REQUEST = "InvalidRequest"
    INTERNAL_ERROR = "InternalError"


class YtNotesError(Exception):
    """Base class for every error this package raises on purpose."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InputError(YtNotesError):
    """User-correctable input problem (bad URL, missing transcript/key/provider)."""


class EmptyInputError(InputError):
    """The chunker was handed empty text."""

    code = ErrorCode.MISSING_TRANSCRIPT


class TranscriptFetchError(YtNotesError):
    """Fetching captions for a video failed."""

    code = ErrorCode.UPSTREAM_FAILURE


class ProviderError(YtNotesError):
    """An upstream LLM call failed at the transport or API level."""

    code = ErrorCode.ANALYSIS_FAILURE

    def __init__(self, vendor: str, message: str, http_status: int | None = None) -> None:
        super().__init__(f"{vendor} request failed: {message}")
        self.vendor = vendor
        self.http_status = http_status


class MalformedResponseError(YtNotesError):
    """An LLM returned text that is not the JSON object we asked for."""

    code = ErrorCode.ANALYSIS_FAILURE

    def __init__(self, vendor: str, message: str) -> None:
        super().__init__(f"{vendor} returned a malformed response: {message}")
        self.vendor = vendor


class AggregationError(YtNotesError):
    """Summarize or consolidate failed while merging chunk results."""

    code = ErrorCode.ANALYSIS_FAILURE

    def __init__(self, step: str, cause: ProviderError | MalformedResponseError) -> None:
        super().__init__(f"Aggregation failed during {step}: {cause.message}")
        self.step = step
        self.cause = cause


class AnalysisTimeoutError(YtNotesError):
    """The whole analysis did not finish within the configured time budget."""

    code = ErrorCode.ANALYSIS_FAILURE
