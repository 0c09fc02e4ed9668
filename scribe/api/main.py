"""
FastAPI application for the Scribe API.

This module sets up the main FastAPI app with routes, middleware,
and configuration.
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scribe import __version__
from scribe.config import config
from scribe.database.client import verify_supabase_connection
from scribe.routes import (
    ai_router,
    drafts_router,
    elements_router,
    manuscripts_router,
    versions_router,
)
from scribe.utils.logging import LogLevel, api_logger, configure_logging, get_log_buffer

configure_logging(config.LOG_LEVEL)

app = FastAPI(
    title="Scribe API",
    description="Manuscript editor with autosave, chapter versions and an AI writing assistant",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware for the editor frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(manuscripts_router)
app.include_router(versions_router)
app.include_router(drafts_router)
app.include_router(elements_router)
app.include_router(ai_router)


# ===== Info =====

@app.get("/api")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Scribe API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "library": "GET /api/manuscripts",
            "manuscript": "GET/PATCH/DELETE /api/manuscripts/{id}",
            "save_chapters": "PUT /api/manuscripts/{id}/chapters",
            "versions": "GET/POST /api/manuscripts/{id}/chapters/{chapter_id}/versions",
            "drafts": "GET/POST /api/manuscripts/{id}/drafts",
            "elements": "GET/POST /api/manuscripts/{id}/elements/{kind}",
            "writer": "POST /api/ai/writer",
            "chat": "POST /api/ai/chat/stream",
            "transcribe": "POST /api/ai/transcribe",
        }
    }


# ===== Health Check =====

@app.get("/health")
async def health_check(deep: bool = False):
    """
    Health check endpoint. Always 200; reports what is configured.

    With deep=true the database is queried as well.
    """
    health = {
        "status": "healthy",
        "environment": config.ENVIRONMENT,
        "supabase_configured": config.supabase_configured,
        "ai_configured": config.ai_configured,
    }
    if deep:
        health["database_reachable"] = verify_supabase_connection()
    return health


# ===== Logs =====

@app.get("/api/logs")
async def get_logs(
    limit: int = Query(100, ge=1, le=500),
    level: Optional[str] = Query(None, description="Filter by level (debug, info, warning, error)"),
    source: Optional[str] = Query(None, description="Filter by source (autosave, versions, writer, api)"),
    manuscript_id: Optional[str] = Query(None, description="Only entries about this manuscript"),
):
    """Recent log entries from the in-memory buffer."""
    if not config.DEV_MODE:
        raise HTTPException(status_code=404, detail="Not found")

    level_filter = None
    if level:
        try:
            level_filter = LogLevel(level.lower())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid log level: {level}")

    log_buffer = get_log_buffer()
    return {
        "logs": log_buffer.get_recent(
            limit=limit, level=level_filter, source=source, manuscript_id=manuscript_id
        ),
        "recent_errors": log_buffer.get_errors(limit=10),
        "stats": log_buffer.get_stats(),
    }


# ===== Error Handlers =====

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    api_logger.error(
        "Unhandled error",
        path=request.url.path,
        type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if config.DEV_MODE else "An error occurred",
            "type": type(exc).__name__
        }
    )


# ===== Startup Event =====

@app.on_event("startup")
async def startup_event():
    api_logger.info(
        "Scribe API starting",
        environment=config.ENVIRONMENT,
        dev_mode=config.DEV_MODE,
        supabase_configured=config.supabase_configured,
        ai_configured=config.ai_configured,
        model=config.AI_MODEL,
    )
    if config.DEV_MODE:
        api_logger.warning("DEV MODE: requests without a token run as the dev user")
