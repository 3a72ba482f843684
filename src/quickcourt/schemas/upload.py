from pydantic import BaseModel, ConfigDict, Field


class ImageResult(BaseModel):
    """A single image stored in Cloudinary."""
    url: str
    public_id: str
    width: int | None = None
    height: int | None = None
    format: str | None = None
    size: int | None = None


class SingleUploadResponse(BaseModel):
    """Response schema for POST /upload/single."""
    success: bool = True
    image: ImageResult


class MultipleUploadResponse(BaseModel):
    """Response schema for POST /upload/multiple."""
    success: bool = True
    images: list[ImageResult]
    count: int


class DeleteResponse(BaseModel):
    """Response schema for DELETE /upload/{public_id}."""
    success: bool = True
    message: str


class TransformSpec(BaseModel):
    """Cloudinary transformation fields; unknown keys are passed through."""
    model_config = ConfigDict(extra="allow")

    width: int | float | str | None = None
    height: int | float | str | None = None
    crop: str | None = None
    quality: int | str | None = None
    fetch_format: str | None = None


class TransformRequest(BaseModel):
    """Body schema for POST /upload/transform."""
    model_config = ConfigDict(populate_by_name=True)

    image_url: str | None = Field(default=None, alias="imageUrl")
    transformations: TransformSpec | None = None


class TransformResponse(BaseModel):
    """Response schema for POST /upload/transform."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    original_url: str = Field(alias="originalUrl")
    transformed_url: str = Field(alias="transformedUrl")
    transformations: dict


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    error: str
    details: str | None = None
