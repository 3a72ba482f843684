"""Tests for the Cloudinary service helpers that need no network."""

import cloudinary
import pytest

from src.quickcourt.schemas.upload import TransformSpec
from src.quickcourt.services.cloudinary_service import (
    build_transformed_url,
    merge_transformations,
    to_image_result,
)


@pytest.fixture(autouse=True)
def demo_cloud():
    previous = cloudinary.config().cloud_name
    cloudinary.config(cloud_name="demo")
    yield
    cloudinary.config(cloud_name=previous)


# ──────────────────────────────────────────────
# merge_transformations
# ──────────────────────────────────────────────
def test_merge_width_override() -> None:
    assert merge_transformations(TransformSpec(width=500)) == {
        "width": 500,
        "height": 300,
        "crop": "fill",
        "quality": "auto",
        "fetch_format": "auto",
    }


def test_merge_none_keeps_defaults() -> None:
    merged = merge_transformations(None)
    assert merged["width"] == 400
    assert merged["height"] == 300


def test_merge_does_not_mutate_defaults() -> None:
    merge_transformations(TransformSpec(width=1, crop="scale"))
    assert merge_transformations(None)["crop"] == "fill"


def test_merge_keeps_extra_keys() -> None:
    spec = TransformSpec.model_validate({"quality": 80, "effect": "grayscale"})
    merged = merge_transformations(spec)
    assert merged["quality"] == 80
    assert merged["effect"] == "grayscale"


# ──────────────────────────────────────────────
# build_transformed_url
# ──────────────────────────────────────────────
def test_build_url_for_public_id() -> None:
    url = build_transformed_url("sports-facilities/court1", merge_transformations(None))
    assert url.startswith("https://res.cloudinary.com/demo/image/upload/")
    assert url.endswith("/sports-facilities/court1")
    assert "w_400" in url and "h_300" in url


def test_build_url_for_remote_image_uses_fetch() -> None:
    url = build_transformed_url("https://example.com/a.jpg", {"width": 200})
    assert url.startswith("https://res.cloudinary.com/demo/image/fetch/")
    assert "w_200" in url


# ──────────────────────────────────────────────
# to_image_result
# ──────────────────────────────────────────────
def test_to_image_result_maps_fields() -> None:
    result = to_image_result({
        "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/x.jpg",
        "url": "http://res.cloudinary.com/demo/image/upload/v1/x.jpg",
        "public_id": "sports-facilities/x",
        "width": 800,
        "height": 600,
        "format": "jpg",
        "bytes": 4567,
    })
    assert result.model_dump() == {
        "url": "https://res.cloudinary.com/demo/image/upload/v1/x.jpg",
        "public_id": "sports-facilities/x",
        "width": 800,
        "height": 600,
        "format": "jpg",
        "size": 4567,
    }
