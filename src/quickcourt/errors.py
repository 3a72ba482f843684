"""Error types rendered as ``{"error": ..., "details": ...}`` JSON bodies."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error carrying an HTTP status, a message and optional details."""

    def __init__(self, status_code: int, error: str, details: str | None = None) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


# ── staging / validation errors (400) ──
class InvalidFileTypeError(ApiError):
    def __init__(self) -> None:
        super().__init__(400, "Only image files are allowed!")


class FileTooLargeError(ApiError):
    def __init__(self, limit_mb: int) -> None:
        super().__init__(400, f"File too large. Maximum size is {limit_mb}MB.")


class TooManyFilesError(ApiError):
    def __init__(self, limit: int) -> None:
        super().__init__(400, f"Too many files. Maximum is {limit} files.")


class AuthError(ApiError):
    def __init__(self, error: str = "Not authenticated") -> None:
        super().__init__(401, error)


# ──────────────────────────────────────────────
# Exception handlers (registered in main.py)
# ──────────────────────────────────────────────
async def api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected request: %s", exc.errors())
    messages = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": "; ".join(messages)},
    )
