"""Service layer – local staging of uploaded images before they go to Cloudinary.

Every accepted part is streamed to ``UPLOAD_DIR`` under a generated name
(``{field}-{millis}-{random}{ext}``) so concurrent requests never collide.
``staged_files`` owns the artifacts for the duration of one request and
removes all of them on exit, successful or not.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import anyio
from fastapi import UploadFile

from src.quickcourt.config import UPLOAD_DIR, settings
from src.quickcourt.errors import (
    ApiError,
    FileTooLargeError,
    InvalidFileTypeError,
    TooManyFilesError,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass
class StagedFile:
    """An uploaded part written to the staging directory."""

    field_name: str
    generated_name: str
    absolute_path: Path
    mime_type: str
    size_bytes: int
    original_name: str | None = None


def generate_name(field_name: str, original_filename: str | None) -> str:
    """Return ``{field_name}-{currentTimeMillis}-{randomInt}{extension}``."""
    extension = Path(original_filename).suffix.lower() if original_filename else ""
    millis = int(time.time() * 1000)
    return f"{field_name}-{millis}-{random.randint(0, 10**9)}{extension}"


def is_image(content_type: str | None) -> bool:
    return bool(content_type) and content_type.startswith("image/")


def discard(path: Path) -> None:
    """Remove a staged artifact if it is still on disk."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Failed to delete staged file %s: %s", path.name, exc)


async def stage_upload(
    upload: UploadFile,
    field_name: str,
    directory: Path = UPLOAD_DIR,
) -> StagedFile:
    """
    Stream *upload* into *directory* and return the staged file.

    Raises ``InvalidFileTypeError`` for non-image parts (nothing is written)
    and ``FileTooLargeError`` once more than ``settings.max_upload_size``
    bytes have been received (the partial file is removed).
    """
    if not is_image(upload.content_type):
        raise InvalidFileTypeError()

    limit = settings.max_upload_size
    if upload.size is not None and upload.size > limit:
        raise FileTooLargeError(settings.max_upload_size_mb)

    generated_name = generate_name(field_name, upload.filename)
    path = directory / generated_name
    written = 0

    try:
        async with await anyio.open_file(path, "wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > limit:
                    raise FileTooLargeError(settings.max_upload_size_mb)
                await out.write(chunk)
    except OSError as exc:
        discard(path)
        logger.error("Could not stage %s in %s: %s", generated_name, directory, exc)
        raise ApiError(500, "Failed to stage upload", str(exc)) from exc
    except BaseException:
        discard(path)
        raise

    logger.debug("Staged %s (%d bytes)", generated_name, written)
    return StagedFile(
        field_name=field_name,
        generated_name=generated_name,
        absolute_path=path.resolve(),
        mime_type=upload.content_type,
        size_bytes=written,
        original_name=upload.filename,
    )


@asynccontextmanager
async def staged_files(
    uploads: Sequence[UploadFile],
    field_name: str,
    max_files: int | None = None,
    directory: Path = UPLOAD_DIR,
) -> AsyncIterator[list[StagedFile]]:
    """
    Stage every part in *uploads* and yield them in input order.

    Count and MIME type are checked for the whole batch before anything is
    written. All staged artifacts are removed when the block exits.
    """
    if max_files is not None and len(uploads) > max_files:
        raise TooManyFilesError(max_files)
    if not all(is_image(upload.content_type) for upload in uploads):
        raise InvalidFileTypeError()

    staged: list[StagedFile] = []
    try:
        for upload in uploads:
            staged.append(await stage_upload(upload, field_name, directory))
        yield staged
    finally:
        for item in staged:
            discard(item.absolute_path)


def sweep_stale_files(directory: Path, max_age_seconds: int) -> int:
    """
    Delete staged files in *directory* older than *max_age_seconds*.

    Requests always clean up after themselves, so anything this old was
    orphaned by a crash between staging and cleanup. Returns the number of
    files removed.
    """
    if not directory.is_dir():
        return 0

    cutoff = time.time() - max_age_seconds
    removed = 0
    for file in directory.iterdir():
        if not file.is_file() or file.stat().st_mtime >= cutoff:
            continue
        try:
            file.unlink()
            removed += 1
            logger.info("🗑️  Deleted orphaned staged file: %s", file.name)
        except OSError as exc:
            logger.warning("Failed to delete %s: %s", file.name, exc)
    return removed
