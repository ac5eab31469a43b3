"""Data models for files handed to the provider by the host."""

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Optional, Union

THUMBNAIL_PREFIX = "thumbnail_"


@dataclass(frozen=True)
class ImageUrl:
    """Delivery URL assigned to an uploaded file.

    The stored string is fixed at construction. Converting the object to a
    string always yields the base delivery URL, so transform parameters can be
    appended by consumers without the host rewriting the stored value.
    """

    value: str

    def as_string(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ImageUrl):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)


@dataclass
class FileRecord:
    """A media file owned by the host.

    Attributes:
        name: File name as stored by the host
        size: Host-reported size
        mime: MIME type
        hash: Host-assigned hash, used to name derived formats
        ext: File extension including the dot
        stream: Readable binary stream with the file contents
        buffer: In-memory file contents (used when no stream is given)
        url: Delivery URL, set once by upload (read-only)
        formats: Derived formats (thumbnail), set by upload
        provider_metadata: Remote identifiers and example URLs, set by upload
    """

    name: str
    size: float
    mime: str
    hash: Optional[str] = None
    ext: Optional[str] = None
    stream: Optional[BinaryIO] = None
    buffer: Optional[bytes] = None
    formats: Optional[dict[str, Any]] = None
    provider_metadata: Optional[dict[str, Any]] = field(default=None)
    _url: Optional[ImageUrl] = field(default=None, init=False, repr=False)

    @property
    def url(self) -> Optional[ImageUrl]:
        """Delivery URL, read-only. Assigned once by upload through pin_url."""
        return self._url

    def pin_url(self, url: ImageUrl) -> None:
        """Attach the delivery URL. A different URL cannot replace it later."""
        if self._url is not None and self._url != url:
            raise AttributeError(f"url is already set to {self._url}")
        self._url = url

    @property
    def payload(self) -> Optional[Union[BinaryIO, bytes]]:
        """Stream if present, otherwise buffer."""
        if self.stream is not None:
            return self.stream
        return self.buffer

    @property
    def remote_id(self) -> Optional[str]:
        if not self.provider_metadata:
            return None
        return self.provider_metadata.get("cloudflare_id") or None

    @property
    def has_thumbnail_name(self) -> bool:
        return bool(self.name) and self.name.startswith(THUMBNAIL_PREFIX)

    @property
    def is_thumbnail(self) -> bool:
        """True for derived thumbnails, which never exist on the remote service."""
        if self.has_thumbnail_name:
            return True
        return bool(self.provider_metadata and self.provider_metadata.get("is_thumbnail"))
