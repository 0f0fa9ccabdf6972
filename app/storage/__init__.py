"""
Storage Module

Binary storage abstraction using the Strategy Pattern.
The backend is chosen from configuration (STORAGE_BACKEND):

- "local": LocalStorage under UPLOAD_DIR
- "cloud": CloudinaryStorage

A new instance is built per call to get_storage(); the application
builds one at startup and injects it into the document store.
"""

from app.core.config import Settings
from app.storage.base import (
    StorageBackend,
    StoredFile,
    StorageError,
    FileNotFoundError,
)
from app.storage.local import LocalStorage
from app.storage.memory import InMemoryStorage


def get_storage(settings: Settings) -> StorageBackend:
    """
    Factory function that returns the configured storage backend.

    Raises:
        ValueError: If the selected backend is missing credentials
    """
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "local":
        return LocalStorage(base_path=settings.UPLOAD_DIR)

    elif backend == "cloud":
        missing = [
            name for name in (
                "CLOUDINARY_CLOUD_NAME",
                "CLOUDINARY_API_KEY",
                "CLOUDINARY_API_SECRET",
            )
            if not getattr(settings, name)
        ]
        if missing:
            raise ValueError(
                f"STORAGE_BACKEND=cloud requires: {', '.join(missing)}"
            )

        # Imported lazily so the local backend never touches the SDK
        from app.storage.cloudinary_storage import CloudinaryStorage

        return CloudinaryStorage(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder_prefix=settings.CLOUDINARY_FOLDER_PREFIX,
        )

    else:
        raise ValueError(
            f"Unknown storage backend: {backend}. "
            f"Valid options: local, cloud"
        )


__all__ = [
    "get_storage",
    "StorageBackend",
    "StoredFile",
    "StorageError",
    "FileNotFoundError",
    "LocalStorage",
    "InMemoryStorage",
]
