# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the GiftFeed API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    GiftFeedException,
    giftfeed_exception_handler,
    validation_exception_handler,
)
from app.routers import health, gifts
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective upload limits on startup so client and server
    limits can be compared from the logs.
    """
    logger.info(f"Starting GiftFeed API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Image uploads: bucket={settings.STORAGE_BUCKET}, "
        f"max={settings.MAX_IMAGE_SIZE_MB}MB, types={settings.allowed_image_types_list}"
    )

    yield

    logger.info("Shutting down GiftFeed API")


# Create FastAPI application
app = FastAPI(
    title="GiftFeed API",
    description="""
## Birthday Gift Feed API

Signed-in friends each submit a gift: an image, a caption and a private
message. The birthday person scrolls through every gift as one feed.

### How It Works

1. **Submit** - `POST /api/v1/gifts` with a multipart form (title, message, image)
2. **Browse** - `GET /api/v1/gifts` returns the feed, newest first
3. **Edit** - `PUT /api/v1/gifts/{id}` (owner only, image optional)
4. **Remove** - `DELETE /api/v1/gifts/{id}` (owner only)

Private messages are only returned to the gift's owner and to admins.

### Quick Start

```bash
curl -X POST http://localhost:8000/api/v1/gifts \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "title=Happy birthday!" \\
  -F "message=Have the best day" \\
  -F "image=@cake.png;type=image/png"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Current user profile and token verification",
        },
        {
            "name": "Gifts",
            "description": "Submit, browse, edit and delete gifts",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
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

@app.exception_handler(GiftFeedException)
async def handle_giftfeed_exception(request: Request, exc: GiftFeedException):
    """Handle the project's own error taxonomy."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return await giftfeed_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed path/query parameters."""
    return await validation_exception_handler(request, exc)


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

app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

app.include_router(
    gifts.router,
    prefix="/api/v1/gifts",
    tags=["Gifts"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "GiftFeed API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
