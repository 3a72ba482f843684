"""Service layer – Cloudinary upload, destroy and URL building.

The Cloudinary SDK is synchronous, so every call that reaches the network is
run in a worker thread to keep the event loop free for other requests.
URL building is pure string work and runs inline.
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Any

import cloudinary
import cloudinary.uploader
import cloudinary.utils
from anyio import to_thread

from src.quickcourt.config import (
    DEFAULT_URL_TRANSFORMATION,
    UPLOAD_TRANSFORMATION,
    settings,
)
from src.quickcourt.schemas.upload import ImageResult, TransformSpec

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Configuration
# ──────────────────────────────────────────────
def configure() -> None:
    """Push credentials from settings into the global Cloudinary config."""
    cloudinary.config(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret.get_secret_value(),
        secure=True,
    )
    if not settings.cloudinary_configured:
        logger.warning(
            "⚠️  Cloudinary credentials not found. Set CLOUDINARY_CLOUD_NAME, "
            "CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET; image uploads will fail."
        )


# ──────────────────────────────────────────────
# Remote calls
# ──────────────────────────────────────────────
async def upload_image(
    path: Path,
    folder: str | None = None,
    transformation: list[dict] | None = None,
) -> dict[str, Any]:
    """Upload a local file and return the raw Cloudinary response."""
    call = partial(
        cloudinary.uploader.upload,
        str(path),
        folder=folder or settings.cloudinary_folder,
        transformation=transformation or UPLOAD_TRANSFORMATION,
    )
    return await to_thread.run_sync(call)


async def destroy_image(public_id: str) -> str | None:
    """Delete a remote image; returns Cloudinary's ``result`` field."""
    response = await to_thread.run_sync(cloudinary.uploader.destroy, public_id)
    return response.get("result")


def to_image_result(response: dict[str, Any]) -> ImageResult:
    """Normalize an upload response into the public result shape."""
    return ImageResult(
        url=response["secure_url"],
        public_id=response["public_id"],
        width=response.get("width"),
        height=response.get("height"),
        format=response.get("format"),
        size=response.get("bytes"),
    )


# ──────────────────────────────────────────────
# URL transformations
# ──────────────────────────────────────────────
def merge_transformations(overrides: TransformSpec | None) -> dict[str, Any]:
    """Layer caller-supplied fields over ``DEFAULT_URL_TRANSFORMATION``."""
    merged = dict(DEFAULT_URL_TRANSFORMATION)
    if overrides is not None:
        merged.update(overrides.model_dump(exclude_none=True))
    return merged


def build_transformed_url(source_url: str, transformation: dict[str, Any]) -> str:
    """
    Build a delivery URL applying *transformation* to *source_url*.

    Absolute URLs are delivered through Cloudinary's ``fetch`` type so the
    transformation applies to remote images too; anything else is treated
    as a public id in the configured cloud. No network call is made.
    """
    options: dict[str, Any] = {"transformation": [dict(transformation)], "secure": True}
    if source_url.startswith(("http://", "https://")):
        options["type"] = "fetch"
    url, _ = cloudinary.utils.cloudinary_url(source_url, **options)
    return url
