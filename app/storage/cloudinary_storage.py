"""
Cloudinary Storage Backend

Document bytes live on Cloudinary as "raw" resources, so any file type
the OCR step accepts (PDF, PNG, JPEG, plain text) is kept byte-for-byte.

Setup:
------
   STORAGE_BACKEND=cloud
   CLOUDINARY_CLOUD_NAME=your-cloud-name
   CLOUDINARY_API_KEY=your-api-key
   CLOUDINARY_API_SECRET=your-api-secret
   DATABASE_URL=postgresql+asyncpg://...   (document metadata)

The Cloudinary SDK is synchronous; its calls run in a worker thread.
Downloads go through httpx against a signed, short-lived URL.
"""

import asyncio
import io
import logging
from datetime import datetime, timezone
from typing import Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
import cloudinary.utils
import httpx

from app.storage.base import (
    StorageBackend,
    StoredFile,
    StorageError,
    FileNotFoundError as StorageFileNotFoundError,
)

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "raw"


class CloudinaryStorage(StorageBackend):
    """
    Cloudinary storage.

    A storage path maps to a public_id under the folder prefix:
    "users/u1/documents/abc.pdf" -> "smartdoc/users/u1/documents/abc.pdf".
    """

    name = "cloud"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder_prefix: str = "smartdoc",
        timeout: float = 60.0,
    ):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.folder_prefix = folder_prefix.strip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout)

        logger.info(f"CloudinaryStorage ready (cloud: {cloud_name}, prefix: {self.folder_prefix or '-'})")

    def _build_public_id(self, path: str) -> str:
        parts = [self.folder_prefix, *path.split("/")]
        return "/".join(part for part in parts if part)

    async def save(
        self,
        file_content: bytes,
        destination_path: str,
        content_type: Optional[str] = None,
    ) -> StoredFile:
        public_id = self._build_public_id(destination_path)
        content_type = content_type or "application/octet-stream"

        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                io.BytesIO(file_content),
                public_id=public_id,
                resource_type=RESOURCE_TYPE,
                # Document ids are unique; overwrite only matters on retries
                overwrite=True,
                context=f"content_type={content_type}",
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload of {public_id} failed: {e}")
            raise StorageError(f"Failed to upload file to Cloudinary: {e}")

        logger.info(f"Uploaded {public_id} to Cloudinary ({result.get('bytes', len(file_content))} bytes)")

        return StoredFile(
            path=destination_path,
            size=result.get("bytes", len(file_content)),
            content_type=content_type,
            stored_at=datetime.now(timezone.utc),
            checksum=result.get("etag"),
        )

    async def get(self, path: str) -> bytes:
        """
        Download a file through a signed private download URL, which
        works whatever the resource's access mode.
        """
        public_id = self._build_public_id(path)
        _, dot, ext = path.rpartition(".")

        download_url = cloudinary.utils.private_download_url(
            public_id,
            ext if dot else "",
            resource_type=RESOURCE_TYPE,
        )

        try:
            response = await self._http_client.get(download_url)
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary download of {public_id} failed: {e}")
            raise StorageError(f"Failed to download file: {e}")

        if response.status_code == 404:
            raise StorageFileNotFoundError(f"File not found: {path}")
        if response.is_error:
            logger.error(f"Cloudinary download of {public_id} returned {response.status_code}")
            raise StorageError(f"Failed to download file: HTTP {response.status_code}")

        return response.content

    async def delete(self, path: str) -> bool:
        public_id = self._build_public_id(path)

        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                resource_type=RESOURCE_TYPE,
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary delete of {public_id} failed: {e}")
            raise StorageError(f"Failed to delete file: {e}")

        # "not found" when the resource was already gone
        deleted = result.get("result") == "ok"
        if deleted:
            logger.info(f"Deleted {public_id} from Cloudinary")
        return deleted

    async def close(self) -> None:
        await self._http_client.aclose()
