"""
Storage Backend Interface

Where document bytes live. A backend only knows opaque paths
("users/{owner}/documents/{id}.png") and their content; document
metadata is kept by app.repositories.

Backends:
- LocalStorage: local disk under UPLOAD_DIR
- CloudinaryStorage: raw resources on Cloudinary
- InMemoryStorage: process memory (tests, throwaway runs)
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class StoredFile:
    """What a backend reports after a successful save."""
    path: str
    size: int
    content_type: str
    stored_at: datetime
    checksum: Optional[str] = None  # md5 locally, etag on Cloudinary


class StorageError(Exception):
    """A storage operation failed."""
    pass


class FileNotFoundError(StorageError):
    """No content is stored under the requested path."""
    pass


class StorageBackend(ABC):
    """
    Async byte storage keyed by relative path.

    Usage:
        storage = LocalStorage(base_path="storage/uploads")
        await storage.save(content, "users/u1/documents/abc.png", "image/png")
    """

    name: str = "storage"

    @abstractmethod
    async def save(
        self,
        file_content: bytes,
        destination_path: str,
        content_type: Optional[str] = None
    ) -> StoredFile:
        """
        Store bytes under destination_path, replacing anything there.

        Raises:
            StorageError: If the bytes can't be written
        """
        pass

    @abstractmethod
    async def get(self, path: str) -> bytes:
        """
        Raises:
            FileNotFoundError: Nothing stored under path
            StorageError: Content exists but can't be read
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Remove stored bytes.

        Returns False when nothing was stored under path; that is not
        an error, so deleting a document whose bytes are already gone
        still succeeds.

        Raises:
            StorageError: If the backend fails to delete
        """
        pass

    async def close(self) -> None:
        """Release network clients. Called during shutdown."""
        return None
