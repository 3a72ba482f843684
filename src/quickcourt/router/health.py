"""Router – health check."""

import os

from fastapi import APIRouter

from src.quickcourt.config import UPLOAD_DIR, settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe; also reports whether uploads can currently succeed."""
    return {
        "status": "ok",
        "cloudinary_configured": settings.cloudinary_configured,
        "staging_writable": UPLOAD_DIR.is_dir() and os.access(UPLOAD_DIR, os.W_OK),
    }
