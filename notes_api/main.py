"""FastAPI application for the notes service.

Endpoints:
  GET    /notes            — List notes, newest first
  POST   /notes            — Create a note
  PUT    /notes/{id}       — Replace a note's title and content
  DELETE /notes/{id}       — Delete a note (no-op if it does not exist)
  POST   /summarize        — Summarize note content
  GET    /health           — Service and note store status
  GET    /metrics          — Prometheus metrics
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager, contextmanager
from typing import Any, Iterator

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

from notes_api.config import settings
from notes_api.errors import (
    NoteNotFoundError,
    NotesError,
    StoreError,
    ValidationError,
)
from notes_api.metrics import HTTP_DURATION, HTTP_REQUESTS, NOTE_OPERATIONS, SUMMARIES
from notes_api.models import Note, NoteIn, SummaryOut, use_system_locale
from notes_api.store import NoteStore, build_store
from notes_api.summarizer import content_from_payload, summarize

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

SUMMARY_ERROR = "Failed to generate summary"

# --- Global instances ---
store: NoteStore = build_store(settings)

# Endpoints excluded from HTTP metrics
_METRICS_EXCLUDE = {"/metrics", "/openapi.json", "/docs", "/redoc"}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request count and duration for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Wrap each request with timing and counting."""
        if request.url.path in _METRICS_EXCLUDE:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Label by route template so /notes/{note_id} stays one series
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        HTTP_REQUESTS.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        HTTP_DURATION.labels(endpoint=endpoint).observe(elapsed)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: open the note store. Shutdown: release it."""
    logger.info("Starting notes API with '%s' store", store.name)
    logger.info("Display dates use locale %s", use_system_locale() or "C")
    await store.init()
    yield
    await store.close()
    logger.info("Notes API shut down.")


app = FastAPI(title="Notes API", version="1.0.0", lifespan=lifespan)

app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store() -> NoteStore:
    """FastAPI dependency returning the configured note store."""
    return store


@contextmanager
def _track(operation: str) -> Iterator[None]:
    """Count a store operation as success or error."""
    try:
        yield
    except NotesError:
        NOTE_OPERATIONS.labels(operation=operation, status="error").inc()
        raise
    NOTE_OPERATIONS.labels(operation=operation, status="success").inc()


# --- Error handlers ---


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(NoteNotFoundError)
async def _not_found(request: Request, exc: NoteNotFoundError) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(StoreError)
async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Note store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": str(exc)})


# --- Endpoints ---


@app.get("/notes", response_model=list[Note])
async def list_notes(store: NoteStore = Depends(get_store)) -> list[Note]:
    """List all notes ordered by creation time, newest first."""
    with _track("list"):
        return await store.list_notes()


@app.post("/notes", response_model=Note, status_code=201)
async def create_note(body: NoteIn, store: NoteStore = Depends(get_store)) -> Note:
    """Create a note. Title and content must not be blank."""
    with _track("create"):
        return await store.create(body.title, body.content)


@app.put("/notes/{note_id}", response_model=Note)
async def update_note(
    note_id: int, body: NoteIn, store: NoteStore = Depends(get_store)
) -> Note:
    """Overwrite a note's title and content. Last writer wins."""
    with _track("update"):
        return await store.update(note_id, body.title, body.content)


@app.delete("/notes/{note_id}", status_code=204)
async def delete_note(note_id: int, store: NoteStore = Depends(get_store)) -> Response:
    """Delete a note. Deleting a note that does not exist succeeds."""
    with _track("delete"):
        await store.delete(note_id)
    return Response(status_code=204)


@app.post("/summarize", response_model=SummaryOut)
async def summarize_note(request: Request) -> Any:
    """Summarize ``{"content": str}``. Any failure answers 500 with an error."""
    try:
        payload = await request.json()
        summary = summarize(content_from_payload(payload))
    except Exception as e:
        logger.error("Summarization failed: %s", e)
        SUMMARIES.labels(status="error").inc()
        return JSONResponse(status_code=500, content={"error": SUMMARY_ERROR})
    SUMMARIES.labels(status="success").inc()
    return SummaryOut(summary=summary)


@app.get("/health")
async def health(store: NoteStore = Depends(get_store)) -> dict[str, Any]:
    """Report the active store backend and whether it is reachable."""
    available = getattr(store, "available", True)
    return {
        "status": "healthy" if available else "degraded",
        "backend": store.name,
    }


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
