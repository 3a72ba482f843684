"""QuickCourt Media – FastAPI application entry-point."""

from contextlib import asynccontextmanager
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware

from src.quickcourt.config import UPLOAD_DIR, settings
from src.quickcourt.errors import ApiError, api_error_handler, validation_error_handler
from src.quickcourt.router import health, upload
from src.quickcourt.services import cloudinary_service
from src.quickcourt.services.staging_service import sweep_stale_files

# Configure logging from settings
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

cloudinary_service.configure()

if not settings.jwt_configured:
    logger.error(
        "❌ JWT_SECRET is not set. Every authenticated /upload route will "
        "answer 401 until it is configured."
    )


# ──────────────────────────────────────────────
# Lifespan: clear orphaned staged files on startup
# ──────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info("🚀 Sweeping staging directory %s …", UPLOAD_DIR)
    removed = sweep_stale_files(UPLOAD_DIR, settings.staging_max_age_seconds)
    logger.info("✅ Removed %d orphaned staged file(s).", removed)
    yield
    logger.info("🛑 Shutting down.")


# ──────────────────────────────────────────────
# Application factory
# ──────────────────────────────────────────────
app = FastAPI(
    title="QuickCourt Media API",
    description="Upload, delete and transform sports-facility images on Cloudinary.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS middleware (configured from environment variables) ──
app.add_middleware(
    middleware_class=CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_methods_list,
    allow_headers=settings.cors_headers_list,
)

logger.info("CORS configured with origins: %s", settings.cors_origins_list)

# ── error bodies: {"error": ..., "details": ...} ──
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# ── register routers ──
app.get('/')(lambda: {"message": "Welcome to the QuickCourt Media API! Visit /docs for API documentation."})
app.include_router(health.router)
app.include_router(upload.router)
