"""Translate package errors into the ``{"error", "code"}`` JSON envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ytnotes.api.models import ErrorResponse
from ytnotes.errors import AnalysisTimeoutError, ErrorCode, YtNotesError

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_URL: 400,
    ErrorCode.MISSING_TRANSCRIPT: 400,
    ErrorCode.MISSING_API_KEY: 400,
    ErrorCode.UNSUPPORTED_PROVIDER: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_REQUEST: 422,
    # Upstream (YouTube or LLM vendor) failures are not the client's fault.
    ErrorCode.UPSTREAM_FAILURE: 502,
    ErrorCode.ANALYSIS_FAILURE: 502,
    ErrorCode.INTERNAL_ERROR: 500,
}


def error_status(exc: YtNotesError) -> int:
    """HTTP status for a package error."""
    if isinstance(exc, AnalysisTimeoutError):
        return 504
    return STATUS_BY_CODE.get(exc.code, 500)


def error_message(exc: YtNotesError) -> str:
    """Human-readable message shown to the user."""
    if exc.code is ErrorCode.ANALYSIS_FAILURE:
        return f"Failed to analyze transcript: {exc.message}"
    return exc.message


def validation_message(exc: RequestValidationError) -> str:
    """First schema problem as ``field: reason``. Input values are never echoed."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    reason = first.get("msg", "invalid value")
    return f"Invalid request: {field}: {reason}" if field else f"Invalid request: {reason}"


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore[unused-variable]
        return JSONResponse(
            status_code=STATUS_BY_CODE[ErrorCode.INVALID_REQUEST],
            content=ErrorResponse(error=validation_message(exc), code=ErrorCode.INVALID_REQUEST).model_dump(
                mode="json"
            ),
        )

    @app.exception_handler(YtNotesError)
    async def _handle_ytnotes_error(request: Request, exc: YtNotesError) -> JSONResponse:  # type: ignore[unused-variable]
        status = error_status(exc)
        if status >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status,
            content=ErrorResponse(error=error_message(exc), code=exc.code).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:  # type: ignore[unused-variable]
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="internal error", code=ErrorCode.INTERNAL_ERROR).model_dump(
                mode="json"
            ),
        )
