from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ytnotes.api.errors import install_error_handlers
from ytnotes.api.routes.analyze import router as analyze_router
from ytnotes.api.routes.export import router as export_router
from ytnotes.api.routes.transcript import router as transcript_router
from ytnotes.config import settings

app = FastAPI(
    title="YouTube Notes API",
    description="Thematic analysis of YouTube video transcripts",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

app.include_router(transcript_router)
app.include_router(analyze_router)
app.include_router(export_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
