"""
In-Memory Storage Backend

Keeps document bytes in a process-local dict. Nothing survives a
restart; used by the test-suite and for throwaway local runs.
"""

import hashlib
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from app.storage.base import (
    StorageBackend,
    StoredFile,
    FileNotFoundError as StorageFileNotFoundError,
)

logger = logging.getLogger(__name__)


class InMemoryStorage(StorageBackend):

    name = "memory"

    def __init__(self):
        self._files: Dict[str, bytes] = {}
        # Held only around dict access
        self._lock = threading.Lock()

    async def save(
        self,
        file_content: bytes,
        destination_path: str,
        content_type: Optional[str] = None
    ) -> StoredFile:
        with self._lock:
            self._files[destination_path] = bytes(file_content)

        return StoredFile(
            path=destination_path,
            size=len(file_content),
            content_type=content_type or "application/octet-stream",
            stored_at=datetime.now(timezone.utc),
            checksum=hashlib.md5(file_content).hexdigest(),
        )

    async def get(self, path: str) -> bytes:
        with self._lock:
            content = self._files.get(path)

        if content is None:
            raise StorageFileNotFoundError(f"File not found: {path}")
        return content

    async def delete(self, path: str) -> bool:
        with self._lock:
            return self._files.pop(path, None) is not None

