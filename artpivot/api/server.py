"""FastAPI application for ArtPivot.

Run: uvicorn artpivot.api.server:app --port 5001
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from artpivot.api.routes import router
from artpivot.settings import get_settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title="ArtPivot",
    description="Art-history timeline catalogue with document extraction",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report missing or malformed fields as 400 with a readable message."""
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "; ".join(problems) or "invalid request"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"ok": False, "error": message})


app.include_router(router, prefix="/api")
