"""
Flexible variant URLs for Cloudflare Images.

Transforms are expressed as a comma separated options segment appended to
the delivery URL, e.g. ``https://imagedelivery.net/<hash>/<id>/width=800,fit=cover``.
"""

import math
from typing import Any, Optional

from cloudflare_images.models import THUMBNAIL_PREFIX

THUMBNAIL_WIDTH = 245
THUMBNAIL_HEIGHT = 156
THUMBNAIL_QUALITY = 85
# Thumbnails are not uploaded; their size is estimated from the original
THUMBNAIL_SIZE_RATIO = 0.1


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_variant_url(base_url: str, **params: Any) -> str:
    """
    Append flexible variant options to a delivery URL.

    Args:
        base_url: Delivery URL of the image (domain + image id)
        **params: Transform options in the order they should appear
            (format, quality, width, height, fit, ...). None values are skipped.

    Returns:
        The variant URL, or base_url unchanged when no options are given
    """
    options = ",".join(
        f"{key}={_format_value(value)}" for key, value in params.items() if value is not None
    )
    if not options:
        return base_url
    return f"{base_url}/{options}"


def estimate_thumbnail_size(size: Optional[float]) -> int:
    """Round-half-up estimate of the thumbnail size."""
    if not size:
        return 0
    return math.floor(size * THUMBNAIL_SIZE_RATIO + 0.5)


def thumbnail_format(
    name: str,
    file_hash: Optional[str],
    ext: Optional[str],
    mime: str,
    size: float,
    image_id: str,
    base_url: str,
) -> dict[str, Any]:
    """Thumbnail entry for the host's formats mapping, served as a flexible variant."""
    return {
        "name": f"{THUMBNAIL_PREFIX}{name}",
        "hash": f"{THUMBNAIL_PREFIX}{file_hash or ''}",
        "ext": ext,
        "mime": mime,
        "width": THUMBNAIL_WIDTH,
        "height": THUMBNAIL_HEIGHT,
        "size": estimate_thumbnail_size(size),
        "url": build_variant_url(
            base_url,
            width=THUMBNAIL_WIDTH,
            height=THUMBNAIL_HEIGHT,
            fit="contain",
            quality=THUMBNAIL_QUALITY,
        ),
        "provider_metadata": {
            "cloudflare_id": image_id,
            "is_thumbnail": True,
            "base_url": base_url,
        },
    }


def flexible_examples(base_url: str) -> dict[str, str]:
    """Ready-made variant URLs for frontend consumers."""
    return {
        "webp": build_variant_url(base_url, format="webp"),
        "quality": build_variant_url(base_url, quality=85),
        "resize": build_variant_url(base_url, width=800, height=600, fit="cover"),
        "combined": build_variant_url(
            base_url, format="webp", quality=85, width=800, height=600, fit="cover"
        ),
        "thumbnail": build_variant_url(
            base_url,
            width=THUMBNAIL_WIDTH,
            height=THUMBNAIL_HEIGHT,
            fit="cover",
            quality=THUMBNAIL_QUALITY,
        ),
        "mobile": build_variant_url(base_url, format="webp", width=640, quality=85, fit="scale-down"),
        "desktop": build_variant_url(
            base_url, format="webp", width=1920, quality=85, fit="scale-down"
        ),
    }
