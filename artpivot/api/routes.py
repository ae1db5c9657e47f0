"""API endpoints for the catalogue, document extraction, and uploads."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Query, UploadFile
from fastapi.responses import JSONResponse

from artpivot import timeline
from artpivot.extractors.document import DocumentExtractor, MissingCredentialError
from artpivot.extractors.llm_fallback import LLMExtractionError
from artpivot.extractors.reader import (
    DocumentReadError,
    UnsupportedFormatError,
    read_document_text,
)
from artpivot.hosting.cloudinary import CloudinaryHost, ImageHostError, ImageHostNotConfigured
from artpivot.settings import get_settings
from artpivot.storage.database import Database
from artpivot.storage.models import ArtPeriod, Artwork, ExtractionHistory
from artpivot.storage.uploads import temporary_upload
from artpivot.validation.schemas import (
    ApiKeyCheck,
    ArtPeriodCreate,
    ArtPeriodUpdate,
    ArtworkCreate,
    ArtworkUpdate,
    ExtractionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_db: Database | None = None


def configure_db(db: Database | None) -> None:
    """Point the API at a specific database (tests, CLI ``serve --db``)."""
    global _db
    _db = db


def get_db() -> Database:
    global _db
    if _db is None:
        _db = Database(get_settings().database_path)
        _db.create_tables()
    return _db


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


# ── Periods ───────────────────────────────────────────────────────────────


@router.get("/periods")
def list_periods():
    """List periods ordered by start year."""
    return {"ok": True, "list": [_serialize_period(p) for p in get_db().list_periods()]}


@router.post("/periods")
def create_period(payload: ArtPeriodCreate):
    period = get_db().create_period(**payload.model_dump())
    return {"ok": True, "item": _serialize_period(period)}


@router.put("/periods/{period_id}")
def update_period(period_id: str, payload: ArtPeriodUpdate):
    period = get_db().update_period(period_id, payload.model_dump(exclude_unset=True))
    if period is None:
        return error_response(404, "not found")
    return {"ok": True, "item": _serialize_period(period)}


@router.delete("/periods/{period_id}")
def delete_period(period_id: str):
    """Delete a period. Its artworks stay, with periodId cleared."""
    detached = get_db().delete_period(period_id)
    if detached is None:
        return error_response(404, "not found")
    return {"ok": True, "detached": detached}


# ── Artworks ──────────────────────────────────────────────────────────────


@router.get("/artworks")
def list_artworks(
    period_id: Optional[str] = Query(None, alias="periodId", description="Only artworks in this period"),
):
    """List artworks ordered by year."""
    artworks = get_db().list_artworks(period_id=period_id)
    return {"ok": True, "list": [_serialize_artwork(a) for a in artworks]}


@router.post("/artworks")
def create_artwork(payload: ArtworkCreate):
    artwork = get_db().create_artwork(**payload.model_dump())
    return {"ok": True, "item": _serialize_artwork(artwork)}


@router.put("/artworks/{artwork_id}")
def update_artwork(artwork_id: str, payload: ArtworkUpdate):
    artwork = get_db().update_artwork(artwork_id, payload.model_dump(exclude_unset=True))
    if artwork is None:
        return error_response(404, "not found")
    return {"ok": True, "item": _serialize_artwork(artwork)}


@router.delete("/artworks/{artwork_id}")
def delete_artwork(artwork_id: str):
    if not get_db().delete_artwork(artwork_id):
        return error_response(404, "not found")
    return {"ok": True}


# ── Timeline & seed ───────────────────────────────────────────────────────


@router.get("/timeline")
def get_timeline():
    """Periods and artworks positioned on a shared 0-100 scale."""
    db = get_db()
    return {"ok": True, **timeline.layout(db.list_periods(), db.list_artworks())}


@router.api_route("/seed", methods=["GET", "POST"])
def seed():
    """Insert the demo catalogue (idempotent)."""
    result = get_db().seed()
    return {"ok": True, "periods": result["periods"], "artworksInserted": result["artworks_inserted"]}


# ── AI extraction ─────────────────────────────────────────────────────────


@router.post("/ai/test")
def check_api_key(payload: ApiKeyCheck):
    """Length-only plausibility check; the key is never sent upstream."""
    plausible = len(payload.api_key.strip()) >= get_settings().min_api_key_length
    message = "API key looks valid" if plausible else "API key may be invalid"
    return {"ok": plausible, "message": message}


@router.post("/ai/read-doc")
def read_doc(file: UploadFile = File(...)):
    """Return the plain text of an uploaded .docx (or .txt/.md) file."""
    name = file.filename or ""
    suffix = Path(name).suffix.lower()
    try:
        with temporary_upload(file.file, get_settings().upload_dir, suffix) as path:
            text = read_document_text(path, original_name=name)
    except UnsupportedFormatError as e:
        return error_response(415, str(e))
    except DocumentReadError:
        return error_response(500, "failed to read document")
    return {"ok": True, "text": text}


@router.post("/ai/extract")
def extract(payload: ExtractionRequest):
    """Extract artwork suggestions, locally if possible, else with the LLM."""
    db = get_db()
    extractor = DocumentExtractor(record_history=db.record_extraction)
    try:
        result = extractor.extract(
            payload.text, ai_config=payload.ai_config(), filename=payload.filename,
        )
    except MissingCredentialError as e:
        return error_response(400, str(e))
    except LLMExtractionError:
        logger.exception("AI extraction failed for %s", payload.filename or "text")
        return error_response(500, "AI extraction failed")

    return {
        "ok": True,
        "source": result.source,
        "periods": result.periods,
        "artworks": result.artworks,
    }


@router.get("/ai/history")
def list_history():
    """Extraction history, newest first."""
    return {"ok": True, "list": [_serialize_history(h) for h in get_db().list_history()]}


# ── Image upload ──────────────────────────────────────────────────────────


@router.post("/upload/image")
def upload_image(file: UploadFile = File(...)):
    settings = get_settings()
    try:
        host = CloudinaryHost(settings)
    except ImageHostNotConfigured as e:
        file.file.close()
        return error_response(500, str(e))

    suffix = Path(file.filename or "").suffix.lower()
    try:
        with temporary_upload(file.file, settings.upload_dir, suffix) as path:
            url = host.upload(path, filename=file.filename)
    except ImageHostError:
        return error_response(500, "upload failed")
    return {"ok": True, "url": url}


# ── Serialization helpers ─────────────────────────────────────────────────


def _serialize_period(period: ArtPeriod) -> dict:
    return {
        "id": period.id,
        "name": period.name,
        "startYear": period.start_year,
        "endYear": period.end_year,
        "color": period.color,
        "description": period.description,
        "imageUrl": period.image_url,
        "createdAt": period.created_at.isoformat() if period.created_at else None,
        "updatedAt": period.updated_at.isoformat() if period.updated_at else None,
    }


def _serialize_artwork(artwork: Artwork) -> dict:
    return {
        "id": artwork.id,
        "title": artwork.title,
        "artist": artwork.artist,
        "year": artwork.year,
        "imageUrl": artwork.image_url,
        "description": artwork.description,
        "periodId": artwork.period_id,
        "createdAt": artwork.created_at.isoformat() if artwork.created_at else None,
        "updatedAt": artwork.updated_at.isoformat() if artwork.updated_at else None,
    }


def _serialize_history(record: ExtractionHistory) -> dict:
    return {
        "id": record.id,
        "filename": record.filename,
        "createdAt": record.created_at.isoformat() if record.created_at else None,
    }
