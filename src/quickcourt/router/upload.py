"""Router – image upload, deletion and URL transformation."""

import logging

import anyio
from fastapi import APIRouter, Body, File, UploadFile

from src.quickcourt.config import settings
from src.quickcourt.errors import ApiError
from src.quickcourt.schemas.upload import (
    DeleteResponse,
    ErrorResponse,
    ImageResult,
    MultipleUploadResponse,
    SingleUploadResponse,
    TransformRequest,
    TransformResponse,
)
from src.quickcourt.services import cloudinary_service
from src.quickcourt.services.auth_service import CurrentUser
from src.quickcourt.services.staging_service import StagedFile, discard, staged_files

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/upload",
    tags=["Upload"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


async def _upload_staged(item: StagedFile) -> ImageResult:
    """Send one staged file to Cloudinary; the staged copy is gone afterwards."""
    try:
        response = await cloudinary_service.upload_image(item.absolute_path)
    except Exception:
        logger.exception("Error uploading %s", item.generated_name)
        discard(item.absolute_path)
        raise
    discard(item.absolute_path)
    return cloudinary_service.to_image_result(response)


@router.post("/single", response_model=SingleUploadResponse)
async def upload_single(
    _user: CurrentUser,
    image: UploadFile | None = File(None),
) -> SingleUploadResponse:
    """
    Upload one image (multipart field ``image``) to Cloudinary.

    The image is resized to 800×600 (fill crop, automatic quality and format)
    and stored under ``settings.cloudinary_folder``.
    """
    if image is None:
        raise ApiError(400, "No image file provided")

    async with staged_files([image], field_name="image") as staged:
        item = staged[0]
        logger.info("Uploading single image: %s", item.generated_name)
        try:
            result = await _upload_staged(item)
        except Exception as exc:
            raise ApiError(500, "Failed to upload image", str(exc)) from exc

    return SingleUploadResponse(image=result)


@router.post("/multiple", response_model=MultipleUploadResponse)
async def upload_multiple(
    _user: CurrentUser,
    images: list[UploadFile] | None = File(None),
) -> MultipleUploadResponse:
    """
    Upload up to ``settings.max_upload_files`` images (multipart field ``images``).

    Uploads run concurrently and the response waits for all of them. Results
    keep the order of the submitted parts. If any upload fails the whole
    request fails and every staged file is removed.
    """
    if not images:
        raise ApiError(400, "No image files provided")

    async with staged_files(
        images, field_name="images", max_files=settings.max_upload_files
    ) as staged:
        logger.info("Uploading %d images", len(staged))
        limiter = anyio.CapacityLimiter(settings.upload_concurrency)
        outcomes: list[ImageResult | Exception | None] = [None] * len(staged)

        async def run(index: int, item: StagedFile) -> None:
            # errors are stored, never raised into the task group
            async with limiter:
                try:
                    outcomes[index] = await _upload_staged(item)
                except Exception as exc:
                    outcomes[index] = exc

        async with anyio.create_task_group() as tg:
            for index, item in enumerate(staged):
                tg.start_soon(run, index, item)

    failures = [outcome for outcome in outcomes if isinstance(outcome, Exception)]
    if failures:
        logger.error("%d of %d uploads failed", len(failures), len(outcomes))
        raise ApiError(500, "Failed to upload images", str(failures[0]))

    return MultipleUploadResponse(images=outcomes, count=len(outcomes))


@router.post("/transform", response_model=TransformResponse)
async def transform_image(
    body: TransformRequest | None = Body(None),
) -> TransformResponse:
    """
    Build a Cloudinary URL for ``imageUrl`` with the requested transformation.

    Defaults are 400×300, fill crop, automatic quality and format; any field
    in ``transformations`` overrides the default of the same name. The source
    image is not fetched or checked.
    """
    if body is None or not body.image_url:
        raise ApiError(400, "Image URL is required")

    transformations = cloudinary_service.merge_transformations(body.transformations)
    try:
        transformed_url = cloudinary_service.build_transformed_url(
            body.image_url, transformations
        )
    except Exception as exc:
        logger.exception("Transform image error")
        raise ApiError(500, "Failed to transform image") from exc

    return TransformResponse(
        original_url=body.image_url,
        transformed_url=transformed_url,
        transformations=transformations,
    )


@router.delete("/{public_id:path}", response_model=DeleteResponse)
async def delete_image(public_id: str, _user: CurrentUser) -> DeleteResponse:
    """Delete an image from Cloudinary by its public id (folder prefix included)."""
    logger.info("Deleting image: %s", public_id)
    try:
        result = await cloudinary_service.destroy_image(public_id)
    except Exception as exc:
        logger.exception("Delete image error")
        raise ApiError(500, "Failed to delete image") from exc

    if result != "ok":
        logger.warning("Cloudinary refused to delete %s: %s", public_id, result)
        raise ApiError(400, "Failed to delete image")

    return DeleteResponse(message="Image deleted successfully")
