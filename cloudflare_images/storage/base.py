"""Abstract storage provider interface."""

from abc import ABC, abstractmethod

from cloudflare_images.models import FileRecord


class StorageProvider(ABC):
    """Abstract interface for host upload providers."""

    @abstractmethod
    async def upload(self, file: FileRecord) -> None:
        """
        Upload a file and attach its URL and metadata to the record.

        Args:
            file: File record to upload; updated in place
        """
        pass

    async def upload_stream(self, file: FileRecord) -> None:
        """Upload a stream-backed file. Same contract as upload."""
        await self.upload(file)

    @abstractmethod
    async def delete(self, file: FileRecord) -> None:
        """
        Delete a previously uploaded file.

        Args:
            file: File record carrying the provider metadata from upload
        """
        pass

    @abstractmethod
    async def check_file_existence(self, file: FileRecord) -> bool:
        """
        Check if a file exists in storage.

        Args:
            file: File record to check

        Returns:
            True if file exists
        """
        pass
