# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# Configures the designbase API with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    DesignbaseException,
    designbase_exception_handler,
    supabase_exception_handler,
)
from app.routers import assets, health, projects, uploads
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup and shutdown."""
    logger.info(f"Starting designbase API in {settings.ENVIRONMENT} mode")
    logger.info(f"Using storage bucket: {settings.ASSETS_BUCKET}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.SUPABASE_JWT_SECRET:
        logger.warning("SUPABASE_JWT_SECRET not set; only JWKS-signed tokens will be accepted")

    yield

    logger.info("Shutting down designbase API")


app = FastAPI(
    title="designbase API",
    description="""
## Project & asset management over Supabase

Projects group uploaded design assets. Files are staged in an upload
session, then uploaded one at a time to Supabase Storage; each upload is
recorded as a row in the `assets` table.

### Quick Start

```bash
# 1. Create a project
curl -X POST http://localhost:8000/api/v1/projects \\
  -H "Authorization: Bearer $TOKEN" -H "Content-Type: application/json" \\
  -d '{"title": "Harbour Pavilion"}'

# 2. Open an upload session and stage files
curl -X POST http://localhost:8000/api/v1/projects/{id}/uploads -H "Authorization: Bearer $TOKEN"
curl -X POST http://localhost:8000/api/v1/uploads/{upload_id}/files \\
  -H "Authorization: Bearer $TOKEN" -F "files=@plan.png" -F "files=@brief.pdf"

# 3. Submit the batch
curl -X POST http://localhost:8000/api/v1/uploads/{upload_id}/submit -H "Authorization: Bearer $TOKEN"
```
""",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Check Supabase access tokens"},
        {"name": "Projects", "description": "Create, list and view projects"},
        {"name": "Assets", "description": "View uploaded assets"},
        {"name": "Uploads", "description": "Stage and submit batch uploads"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(DesignbaseException)
async def handle_designbase_exception(request: Request, exc: DesignbaseException):
    """Handle custom designbase exceptions."""
    return await designbase_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_exception(request: Request, exc: SupabaseClientError):
    """Handle backend failures outside the upload workflow."""
    logger.error(f"Backend error: {exc}")
    return await supabase_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(projects.router, prefix="/api/v1/projects", tags=["Projects"])
app.include_router(assets.router, prefix="/api/v1/assets", tags=["Assets"])
app.include_router(uploads.router, prefix="/api/v1", tags=["Uploads"])


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "designbase API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
