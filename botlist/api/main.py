"""
botlist.api.main — FastAPI application entry point
=====================================================

Run with::

    uvicorn botlist.api.main:app --reload --port 8000

or ``python -m botlist`` (creates tables and seeds bootstrap admins first).
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

load_dotenv()

from botlist import __version__  # noqa: E402
from botlist.api.auth import router as auth_router  # noqa: E402
from botlist.api.deps import get_engine, get_notifier  # noqa: E402
from botlist.api.routes.admin import router as admin_router  # noqa: E402
from botlist.api.routes.bots import router as bots_router  # noqa: E402
from botlist.api.routes.partners import router as partners_router  # noqa: E402
from botlist.errors import DirectoryError  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — warm the DB engine, flush notifications."""
    engine = get_engine()
    logger.info("botlist API started — engine ready (%s)", engine.url.database)
    yield
    await get_notifier().drain()
    logger.info("botlist API shutting down")


app = FastAPI(
    title="Bot Directory API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------
@app.exception_handler(DirectoryError)
async def directory_error_handler(request: Request, exc: DirectoryError):
    if exc.status_code >= 500:
        logger.error("%s %s → %r", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # Internal error text stays in the server log
    logger.exception("Store error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Mount routers
app.include_router(auth_router, prefix="/api")
app.include_router(bots_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(partners_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
