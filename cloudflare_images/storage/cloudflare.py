"""
Cloudflare Images upload provider.

Uploads host media files to Cloudflare Images and serves them through
flexible variants: one stored original, with transforms selected by URL.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from cloudflare_images.config import ProviderConfig
from cloudflare_images.models import FileRecord, ImageUrl
from cloudflare_images.schemas import ImageUploadResponse
from cloudflare_images.storage.base import StorageProvider
from cloudflare_images.variants import build_variant_url, flexible_examples, thumbnail_format

logger = logging.getLogger(__name__)

PROVIDER_TAG = "cloudflare-images"


class CloudflareImagesError(Exception):
    """Cloudflare Images provider error."""

    pass


class ConfigurationError(CloudflareImagesError):
    """Provider configuration is missing required settings."""

    pass


class MissingPayloadError(CloudflareImagesError):
    """File record has neither a stream nor a buffer."""

    pass


class UploadError(CloudflareImagesError):
    """Upload was rejected or could not be completed."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DeleteError(CloudflareImagesError):
    """Delete was rejected or could not be completed."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CloudflareImagesProvider(StorageProvider):
    """Storage provider backed by the Cloudflare Images API."""

    def __init__(self, config: ProviderConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the provider.

        Args:
            config: Validated provider configuration
            client: Optional HTTP client to use instead of a lazily created one
        """
        self.config = config
        self.client = client

        logger.info("Cloudflare Images provider initialized:")
        logger.info(f"  - Account ID: {config.account_id}")
        logger.info(f"  - Images Domain: {config.images_domain}")
        logger.info(f"  - Signed URLs: {config.require_signed_urls}")
        logger.info("  - Using flexible variants (no fixed variants)")

    async def __aenter__(self) -> "CloudflareImagesProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.config.request_timeout)
            logger.debug(f"Created HTTP client with {self.config.request_timeout}s timeout")
        return self.client

    def _get_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.access_token}"}

    def _image_url(self, image_id: str) -> str:
        return f"{self.config.images_endpoint}/{image_id}"

    def _upload_metadata(self, file: FileRecord) -> str:
        return json.dumps(
            {
                "originalName": file.name,
                "uploadedAt": datetime.now(timezone.utc).isoformat(),
                "strapiProvider": PROVIDER_TAG,
            }
        )

    async def upload(self, file: FileRecord) -> None:
        """
        Upload a file to Cloudflare Images.

        Sets ``url``, ``formats`` and ``provider_metadata`` on the record.
        Thumbnails generated by the host are skipped; the thumbnail format is
        served as a flexible variant of the original instead.

        Raises:
            MissingPayloadError: If the record has no stream or buffer
            UploadError: If the API rejects the upload or cannot be reached
        """
        if file.has_thumbnail_name:
            logger.info(f"⏭️  Skipping thumbnail upload: {file.name}")
            return

        payload = file.payload
        if payload is None:
            raise MissingPayloadError("No file stream or buffer available")

        logger.info(f"📤 Uploading {file.name} ({file.size} bytes) to Cloudflare Images...")

        try:
            response = await self._get_client().post(
                self.config.images_endpoint,
                files={"file": (file.name, payload, file.mime)},
                data={
                    "requireSignedURLs": "true" if self.config.require_signed_urls else "false",
                    "metadata": self._upload_metadata(file),
                },
                headers=self._get_headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Upload error for {file.name}: {type(e).__name__}: {e}")
            raise UploadError(f"Cloudflare Images upload error for {file.name}: {e}") from e

        body = response.text
        logger.debug(f"Response status: {response.status_code}")

        if not response.is_success:
            logger.error(f"❌ Upload failed: {response.status_code} - {body}")
            raise UploadError(
                f"Cloudflare Images upload failed: {response.status_code} - {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            data = ImageUploadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"❌ Failed to parse response JSON: {body}")
            raise UploadError(
                f"Invalid JSON response: {response.status_code} - {body}",
                status_code=response.status_code,
                body=body,
            ) from e

        if not data.success or data.result is None:
            errors = json.dumps(data.errors or "Unknown error")
            logger.error(f"❌ Cloudflare API returned error: {errors}")
            raise UploadError(
                f"Cloudflare Images API error: {response.status_code} - {errors}",
                status_code=response.status_code,
                body=body,
            )

        image_id = data.result.id
        base_url = f"{self.config.images_domain}/{image_id}"

        file.pin_url(ImageUrl(base_url))
        file.formats = {
            "thumbnail": thumbnail_format(
                name=file.name,
                file_hash=file.hash,
                ext=file.ext,
                mime=file.mime,
                size=file.size,
                image_id=image_id,
                base_url=base_url,
            )
        }
        file.provider_metadata = {
            "cloudflare_id": image_id,
            "uploaded_at": data.result.uploaded,
            "filename": data.result.filename,
            "base_url": base_url,
            "images_domain": self.config.images_domain,
            "account_hash": self.config.account_hash,
            "flexible_examples": flexible_examples(base_url),
        }

        logger.info(f"✅ File uploaded: {file.name}", extra={"image_id": image_id})
        logger.info(f"📸 Base URL: {base_url}")
        logger.info(f"🖼️  Thumbnail URL: {file.formats['thumbnail']['url']}")
        logger.debug(
            "🎯 Example usage: "
            + build_variant_url(
                base_url, format="webp", width=800, height=600, fit="cover", quality=85
            )
        )

    async def delete(self, file: FileRecord) -> None:
        """
        Delete a file from Cloudflare Images.

        Thumbnails and records without a Cloudflare ID are skipped, and an
        image that is already gone (404) counts as deleted.

        Raises:
            DeleteError: If the API rejects the delete or cannot be reached
        """
        if file.has_thumbnail_name:
            logger.info(f"⏭️  Skipping thumbnail deletion (never uploaded): {file.name}")
            return

        if file.is_thumbnail:
            logger.info(f"⏭️  Skipping thumbnail deletion from metadata: {file.name}")
            return

        image_id = file.remote_id
        if not image_id:
            logger.warning(f"⚠️  No Cloudflare ID found for file deletion, skipping: {file.name}")
            return

        try:
            response = await self._get_client().delete(
                self._image_url(image_id),
                headers=self._get_headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Delete error for {file.name}: {type(e).__name__}: {e}")
            raise DeleteError(f"Cloudflare Images delete error for {file.name}: {e}") from e

        if response.status_code == 404:
            logger.info(f"✅ File already deleted from Cloudflare Images: {file.name}")
            return

        if not response.is_success:
            body = response.text
            logger.error(f"❌ Cloudflare Images delete failed: {response.status_code} - {body}")
            raise DeleteError(
                f"Failed to delete file from Cloudflare Images: {response.status_code} - {body}",
                status_code=response.status_code,
                body=body,
            )

        logger.info(f"🗑️  File deleted from Cloudflare Images: {file.name}", extra={"image_id": image_id})

    async def check_file_existence(self, file: FileRecord) -> bool:
        """Return True if the image is still stored. Never raises; any failure means False."""
        image_id = file.remote_id
        if not image_id:
            return False

        try:
            response = await self._get_client().get(
                self._image_url(image_id),
                headers=self._get_headers(),
            )
        except Exception as e:
            logger.error(f"Error checking file existence: {type(e).__name__}: {e}")
            return False

        return response.is_success

    async def close(self) -> None:
        """Close the HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None


def init(
    options: Union[ProviderConfig, Mapping[str, Any]],
    client: Optional[httpx.AsyncClient] = None,
) -> CloudflareImagesProvider:
    """
    Create a provider from the host's provider options.

    Args:
        options: ProviderConfig, or a mapping with accessToken, accountId and
            optional imagesDomain / requireSignedURLs
        client: Optional HTTP client (tests, custom transports)

    Raises:
        ConfigurationError: If the access token or account ID is missing
    """
    if isinstance(options, ProviderConfig):
        config = options
    else:
        try:
            config = ProviderConfig.from_options(options)
        except ValidationError as e:
            message = e.errors()[0]["msg"].removeprefix("Value error, ")
            raise ConfigurationError(message) from e

    return CloudflareImagesProvider(config, client=client)
