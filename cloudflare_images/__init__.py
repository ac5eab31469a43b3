"""Cloudflare Images upload provider for content-management hosts."""

from cloudflare_images.config import ProviderConfig
from cloudflare_images.models import FileRecord, ImageUrl
from cloudflare_images.storage.cloudflare import (
    CloudflareImagesError,
    CloudflareImagesProvider,
    ConfigurationError,
    DeleteError,
    MissingPayloadError,
    UploadError,
    init,
)

__version__ = "1.0.0"

__all__ = [
    "CloudflareImagesError",
    "CloudflareImagesProvider",
    "ConfigurationError",
    "DeleteError",
    "FileRecord",
    "ImageUrl",
    "MissingPayloadError",
    "ProviderConfig",
    "UploadError",
    "init",
]
