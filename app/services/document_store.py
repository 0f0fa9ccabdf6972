"""
Document Store

Persists document metadata and binary content together, keyed by
(document id, owner id). Composes a StorageBackend for the bytes and a
DocumentRepository for the metadata.

Ownership is enforced here: a document owned by someone else is
reported exactly like a missing one.
"""

import io
import uuid
import logging
from datetime import datetime, timezone
from typing import BinaryIO, List, Union

from app.repositories.base import DocumentRepository
from app.schemas.document import Document, ProcessingStatus
from app.services.errors import (
    ContentUnavailableError,
    DocumentNotFoundError,
    StorageWriteError,
)
from app.storage.base import StorageBackend, StorageError
from app.utils.file_utils import build_document_path, sanitize_filename

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Document persistence: bytes in storage, metadata in the repository.
    """

    def __init__(self, storage: StorageBackend, repository: DocumentRepository):
        self.storage = storage
        self.repository = repository

    # ============================================================
    # CREATE
    # ============================================================

    async def create(
        self,
        owner_id: str,
        content: Union[bytes, BinaryIO],
        filename: str,
        mime_type: str,
        size: int
    ) -> Document:
        """
        Store a new document.

        Bytes are written first, then the metadata record. If the
        record can't be written the bytes are deleted again, so a
        failed create leaves nothing behind.

        Raises:
            StorageWriteError: If either write fails
        """
        if not isinstance(content, (bytes, bytearray)):
            content = content.read()

        document_id = str(uuid.uuid4())
        storage_path = build_document_path(owner_id, document_id, filename)

        # Step 1: Save bytes
        try:
            await self.storage.save(
                file_content=content,
                destination_path=storage_path,
                content_type=mime_type
            )
        except StorageError as e:
            logger.error(f"Storage failed for {storage_path}: {e}")
            raise StorageWriteError(f"Failed to save file: {e}")

        document = Document(
            id=document_id,
            owner_id=owner_id,
            filename=sanitize_filename(filename),
            size_bytes=size,
            mime_type=mime_type,
            uploaded_at=datetime.now(timezone.utc),
            storage_locator=storage_path,
            extraction_status=ProcessingStatus.PENDING,
            summary_status=ProcessingStatus.PENDING,
        )

        # Step 2: Create metadata record
        try:
            await self.repository.add(document)
        except Exception as e:
            # Rollback: delete file from storage
            logger.error(f"Metadata insert failed, rolling back storage: {e}")
            try:
                await self.storage.delete(storage_path)
            except StorageError as cleanup_error:
                logger.error(f"Cleanup failed for {storage_path}: {cleanup_error}")
            raise StorageWriteError("Failed to save document record")

        logger.info(f"Document created: {document_id} (owner: {owner_id}, {size} bytes)")
        return document

    # ============================================================
    # READ OPERATIONS
    # ============================================================

    async def get(self, document_id: str, owner_id: str) -> Document:
        """
        Raises:
            DocumentNotFoundError: If the document doesn't exist or
                belongs to another owner
        """
        document = await self.repository.get(document_id)

        if document is None:
            raise DocumentNotFoundError("Document not found")

        if document.owner_id != owner_id:
            # Log as security event
            logger.warning(
                f"Unauthorized access attempt: user {owner_id} "
                f"tried to access document {document_id} owned by {document.owner_id}"
            )
            raise DocumentNotFoundError("Document not found")  # Don't reveal existence

        return document

    async def list(self, owner_id: str, limit: int, offset: int = 0) -> List[Document]:
        """Owner's documents, newest first."""
        return await self.repository.list_by_owner(owner_id, limit=limit, offset=offset)

    async def count(self, owner_id: str) -> int:
        return await self.repository.count_by_owner(owner_id)

    async def open_content(self, document: Document) -> BinaryIO:
        """
        Open the stored bytes of a document.

        Raises:
            ContentUnavailableError: If the bytes are missing or unreadable
        """
        try:
            content = await self.storage.get(document.storage_locator)
        except StorageError as e:
            logger.error(f"Failed to read file {document.storage_locator}: {e}")
            raise ContentUnavailableError("Document content is unavailable")

        return io.BytesIO(content)

    # ============================================================
    # WRITE OPERATIONS
    # ============================================================

    async def update(self, document: Document) -> None:
        """
        Persist the statuses and texts of an existing document.

        Raises:
            DocumentNotFoundError: If the record no longer exists
            StorageWriteError: If the repository write fails
        """
        try:
            updated = await self.repository.update(document)
        except Exception as e:
            logger.error(f"Metadata update failed for {document.id}: {e}")
            raise StorageWriteError("Failed to update document record")

        if not updated:
            raise DocumentNotFoundError("Document not found")

    async def delete(self, document_id: str, owner_id: str) -> None:
        """
        Delete metadata first, then the bytes.

        Missing content is tolerated; the record is gone either way.

        Raises:
            DocumentNotFoundError: If the document doesn't exist or
                belongs to another owner
        """
        document = await self.get(document_id, owner_id)

        deleted = await self.repository.delete(document_id)
        if not deleted:
            # Removed by a concurrent request
            raise DocumentNotFoundError("Document not found")

        try:
            await self.storage.delete(document.storage_locator)
            logger.info(f"Document deleted: {document_id}, file: {document.storage_locator}")
        except StorageError as e:
            # Log but don't fail - the record is already gone
            logger.warning(f"Failed to delete file {document.storage_locator}: {e}")
