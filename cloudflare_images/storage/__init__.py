"""Storage providers for host media uploads."""

from cloudflare_images.storage.base import StorageProvider
from cloudflare_images.storage.cloudflare import CloudflareImagesProvider, init

__all__ = ["StorageProvider", "CloudflareImagesProvider", "init"]
