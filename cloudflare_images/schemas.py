"""Pydantic schemas for Cloudflare API responses."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ImageResult(BaseModel):
    """Image details returned by the Images upload endpoint."""

    model_config = ConfigDict(extra="allow")

    id: str
    filename: Optional[str] = None
    uploaded: Optional[str] = None
    requireSignedURLs: Optional[bool] = None
    variants: Optional[list[str]] = None


class ImageUploadResponse(BaseModel):
    """Cloudflare API v4 response envelope for an image upload."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    result: Optional[ImageResult] = None
    errors: Optional[list[Any]] = None
    messages: Optional[list[Any]] = None
