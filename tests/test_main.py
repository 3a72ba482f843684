"""Tests for QuickCourt Media API endpoints outside /upload."""

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from src.quickcourt.config import Settings
from src.quickcourt.main import app

client = TestClient(app)


# ──────────────────────────────────────────────
# Root & health
# ──────────────────────────────────────────────
def test_root_message() -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert "QuickCourt Media API" in response.json()["message"]


def test_health_check() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["staging_writable"] is True
    assert isinstance(data["cloudinary_configured"], bool)


@pytest.mark.parametrize(
    "field", ["max_upload_files", "upload_concurrency", "staging_max_age_seconds"]
)
def test_settings_reject_non_positive_limits(field: str) -> None:
    with pytest.raises(ValidationError):
        Settings(**{field: 0})


def test_settings_secrets_default_to_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.delenv("CLOUDINARY_API_SECRET", raising=False)
    fresh = Settings(_env_file=None)
    assert fresh.jwt_configured is False
    assert fresh.cloudinary_api_secret.get_secret_value() == ""


def test_lifespan_runs_with_context_manager() -> None:
    """Startup sweep must not break the app when used as a context manager."""
    with TestClient(app) as scoped:
        assert scoped.get("/health").status_code == 200
