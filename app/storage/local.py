"""
Local Filesystem Storage Backend

Keeps document bytes under UPLOAD_DIR. Fine for development and a
single server; several API replicas need the cloud backend instead.

Layout:
-------
{base_path}/
└── users/
    └── {owner_id}/
        └── documents/
            └── {document_id}{ext}
"""

import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from app.storage.base import (
    StorageBackend,
    StoredFile,
    StorageError,
    FileNotFoundError as StorageFileNotFoundError,
)

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """
    Filesystem storage with async I/O (aiofiles).

    Every path is resolved and checked against base_path before use,
    so a crafted locator can't read or write outside it.
    """

    name = "local"

    def __init__(self, base_path: str):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._root = self.base_path.resolve()

        logger.info(f"LocalStorage root: {self._root}")

    def _resolve(self, relative_path: str) -> Path:
        """
        Raises:
            StorageError: If the path escapes base_path
        """
        resolved = (self._root / relative_path).resolve()
        if resolved != self._root and self._root not in resolved.parents:
            logger.warning(f"Rejected storage path outside root: {relative_path}")
            raise StorageError(f"Invalid path: {relative_path}")
        return resolved

    async def save(
        self,
        file_content: bytes,
        destination_path: str,
        content_type: Optional[str] = None
    ) -> StoredFile:
        target = self._resolve(destination_path)

        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(file_content)
        except OSError as e:
            logger.error(f"Could not write {destination_path}: {e}")
            raise StorageError(f"Failed to save file: {e}")

        checksum = hashlib.md5(file_content).hexdigest()
        logger.info(f"Stored {destination_path} ({len(file_content)} bytes, md5 {checksum[:8]})")

        return StoredFile(
            path=destination_path,
            size=len(file_content),
            content_type=content_type or "application/octet-stream",
            stored_at=datetime.now(timezone.utc),
            checksum=checksum,
        )

    async def get(self, path: str) -> bytes:
        target = self._resolve(path)

        if not await aiofiles.os.path.isfile(target):
            raise StorageFileNotFoundError(f"File not found: {path}")

        try:
            async with aiofiles.open(target, "rb") as f:
                return await f.read()
        except OSError as e:
            logger.error(f"Could not read {path}: {e}")
            raise StorageError(f"Failed to read file: {e}")

    async def delete(self, path: str) -> bool:
        target = self._resolve(path)

        if not await aiofiles.os.path.exists(target):
            return False

        try:
            await aiofiles.os.remove(target)
        except OSError as e:
            logger.error(f"Could not delete {path}: {e}")
            raise StorageError(f"Failed to delete file: {e}")

        logger.info(f"Deleted {path}")
        return True

