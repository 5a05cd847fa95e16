"""Export endpoint: download an analysis as markdown."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ytnotes.api.models import ExportRequest
from ytnotes.export import export_filename, render_markdown

router = APIRouter()


@router.post("/api/export", response_class=PlainTextResponse)
async def export(request: ExportRequest) -> PlainTextResponse:
    """Render the posted analysis as a markdown attachment."""
    return PlainTextResponse(
        render_markdown(request.analysis),
        media_type="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(request.analysis)}"'},
    )
