import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Settings (from environment variables / .env)
# ──────────────────────────────────────────────
class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # CORS settings
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000"
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,PUT,DELETE,OPTIONS"
    cors_allow_headers: str = "*"

    # Upload settings
    max_upload_size: int = 5 * 1024 * 1024  # 5 MB
    max_upload_files: int = Field(default=10, ge=1)
    upload_concurrency: int = Field(default=10, ge=1)
    staging_max_age_seconds: int = Field(default=3600, ge=1)

    # Cloudinary
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: SecretStr = SecretStr("")
    cloudinary_folder: str = "sports-facilities"

    # Auth (tokens are issued by the main QuickCourt backend).
    # Empty means every bearer token is rejected.
    jwt_secret: SecretStr = SecretStr("")
    jwt_algorithm: str = "HS256"

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def cors_methods_list(self) -> list[str]:
        """Parse CORS methods from comma-separated string."""
        if self.cors_allow_methods == "*":
            return ["*"]
        return [method.strip() for method in self.cors_allow_methods.split(",")]

    @property
    def cors_headers_list(self) -> list[str]:
        """Parse CORS headers from comma-separated string."""
        if self.cors_allow_headers == "*":
            return ["*"]
        return [header.strip() for header in self.cors_allow_headers.split(",")]

    @property
    def max_upload_size_mb(self) -> int:
        return self.max_upload_size // (1024 * 1024)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name
            and self.cloudinary_api_key
            and self.cloudinary_api_secret.get_secret_value()
        )

    @property
    def jwt_configured(self) -> bool:
        return bool(self.jwt_secret.get_secret_value())


# Global settings instance
settings = Settings()

# ──────────────────────────────────────────────
# Paths
# ──────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent          # src/
UPLOAD_DIR = BASE_DIR / "uploads"

# Create staging directory if it doesn't exist
try:
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
except OSError as exc:
    logger.warning("Could not create staging directory %s: %s", UPLOAD_DIR, exc)

# ──────────────────────────────────────────────
# Cloudinary transformation defaults
# ──────────────────────────────────────────────
# Applied to every image stored through /upload/single and /upload/multiple.
UPLOAD_TRANSFORMATION: list[dict] = [
    {"width": 800, "height": 600, "crop": "fill", "quality": "auto"},
    {"fetch_format": "auto"},
]

# Base for /upload/transform; caller-supplied fields win.
DEFAULT_URL_TRANSFORMATION: dict[str, object] = {
    "width": 400,
    "height": 300,
    "crop": "fill",
    "quality": "auto",
    "fetch_format": "auto",
}
