"""
Document Service

Business logic for document operations: upload, OCR, summarization,
history, download and delete.

OCR and summary run inline in the triggering request. Each stage moves
pending/failed/completed -> processing -> completed | failed, and the
document is persisted at every step so readers see progress.
"""

import logging
from typing import BinaryIO, Optional, Tuple

from fastapi import UploadFile

from app.ai.ocr.base import ExtractionError, TextExtractionService
from app.ai.summarization.base import SummarizationError, SummarizationService
from app.core.config import Settings
from app.schemas.document import (
    Document,
    DocumentHistory,
    DocumentResponse,
    Pagination,
    ProcessingStatus,
)
from app.services.document_store import DocumentStore
from app.services.errors import (
    ContentUnavailableError,
    DocumentServiceError,
    DocumentValidationError,
    FileTooLargeError,
    PreconditionFailedError,
)
from app.utils.file_utils import resolve_mime_type, validate_file_size

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Service class for document operations.

    Every operation takes the caller's owner id explicitly; the store
    rejects documents owned by anyone else as not found.
    """

    def __init__(
        self,
        store: DocumentStore,
        extraction_service: TextExtractionService,
        summarization_service: SummarizationService,
        settings: Settings,
    ):
        self.store = store
        self.extraction_service = extraction_service
        self.summarization_service = summarization_service
        self.settings = settings

    # ============================================================
    # HELPER METHODS
    # ============================================================

    async def _persist_failure(self, document: Document) -> None:
        """
        Persist a failed stage status.

        Called while a stage error is already being raised; a second
        failure here is logged so the original error reaches the caller.
        """
        try:
            await self.store.update(document)
        except DocumentServiceError as e:
            logger.error(f"Failed to record failed status for {document.id}: {e}")

    # ============================================================
    # UPLOAD - The Main Entry Point
    # ============================================================

    async def upload_document(
        self,
        owner_id: str,
        file: Optional[UploadFile]
    ) -> Document:
        """
        Validate and store an uploaded file.

        Raises:
            DocumentValidationError: Missing or empty file
            FileTooLargeError: File exceeds MAX_FILE_SIZE_MB
            StorageWriteError: Bytes or metadata could not be saved
        """
        if file is None:
            raise DocumentValidationError("File is required")

        # Loads the entire file into memory; size is capped below
        try:
            file_content = await file.read()
        except OSError as e:
            logger.error(f"Failed to read uploaded file: {e}")
            raise DocumentValidationError("Failed to read uploaded file")

        original_filename = file.filename or "unnamed_file"

        valid, error = validate_file_size(len(file_content), self.settings.MAX_FILE_SIZE_BYTES)
        if not valid:
            logger.warning(f"File validation failed for '{original_filename}': {error}")
            if file_content:
                raise FileTooLargeError(error)
            raise DocumentValidationError(error)

        mime_type = resolve_mime_type(file.content_type, file_content)

        document = await self.store.create(
            owner_id=owner_id,
            content=file_content,
            filename=original_filename,
            mime_type=mime_type,
            size=len(file_content),
        )
        return document

    # ============================================================
    # READ OPERATIONS
    # ============================================================

    async def get_document(self, document_id: str, owner_id: str) -> Document:
        """
        Raises:
            DocumentNotFoundError: If document doesn't exist or access denied
        """
        return await self.store.get(document_id, owner_id)

    async def list_documents(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 20
    ) -> DocumentHistory:
        """
        One page of the owner's documents, newest first.
        """
        offset = (page - 1) * limit

        documents = await self.store.list(owner_id, limit=limit, offset=offset)
        total = await self.store.count(owner_id)

        return DocumentHistory(
            documents=[DocumentResponse.from_document(doc) for doc in documents],
            pagination=Pagination(page=page, limit=limit, total=total),
        )

    async def get_document_content(
        self,
        document_id: str,
        owner_id: str
    ) -> Tuple[BinaryIO, str, str]:
        """
        Get document file content for download.

        Returns:
            (stream, filename, mime_type)
        """
        document = await self.store.get(document_id, owner_id)
        stream = await self.store.open_content(document)
        return stream, document.filename, document.mime_type

    # ============================================================
    # DELETE OPERATIONS
    # ============================================================

    async def delete_document(self, document_id: str, owner_id: str) -> None:
        """
        Raises:
            DocumentNotFoundError: If document doesn't exist or access denied
        """
        await self.store.delete(document_id, owner_id)

    # ============================================================
    # PROCESSING
    # ============================================================

    async def trigger_extraction(self, document_id: str, owner_id: str) -> Document:
        """
        Run OCR on a document and store the text.

        Re-running after completed or failed overwrites the previous
        result. The previous text survives a failed re-run.

        Raises:
            DocumentNotFoundError: If document doesn't exist or access denied
            ContentUnavailableError: Stored bytes can't be read
            ExtractionError: OCR backend failed
        """
        document = await self.store.get(document_id, owner_id)

        document.extraction_status = ProcessingStatus.PROCESSING
        await self.store.update(document)

        try:
            stream = await self.store.open_content(document)
        except ContentUnavailableError:
            document.extraction_status = ProcessingStatus.FAILED
            await self._persist_failure(document)
            raise

        try:
            text = await self.extraction_service.extract(stream, document.mime_type)
        except ExtractionError as e:
            logger.warning(f"OCR failed for document {document_id}: {e}")
            document.extraction_status = ProcessingStatus.FAILED
            await self._persist_failure(document)
            raise

        document.extracted_text = text
        document.extraction_status = ProcessingStatus.COMPLETED
        await self.store.update(document)

        logger.info(f"OCR completed for document {document_id}")
        return document

    async def trigger_summarization(self, document_id: str, owner_id: str) -> Document:
        """
        Summarize a document's extracted text.

        Raises:
            DocumentNotFoundError: If document doesn't exist or access denied
            PreconditionFailedError: OCR hasn't completed (nothing is changed)
            SummarizationError: Summary backend failed
        """
        document = await self.store.get(document_id, owner_id)

        if not document.is_ready_for_summary:
            raise PreconditionFailedError("OCR must be completed before generating summary")

        document.summary_status = ProcessingStatus.PROCESSING
        await self.store.update(document)

        try:
            summary = await self.summarization_service.summarize(document.extracted_text)
        except SummarizationError as e:
            logger.warning(f"Summary failed for document {document_id}: {e}")
            document.summary_status = ProcessingStatus.FAILED
            await self._persist_failure(document)
            raise

        document.summary_text = summary
        document.summary_status = ProcessingStatus.COMPLETED
        await self.store.update(document)

        logger.info(f"Summary completed for document {document_id}")
        return document

    async def close(self) -> None:
        """Release storage, repository and backend clients."""
        await self.extraction_service.close()
        await self.summarization_service.close()
        await self.store.storage.close()
        await self.store.repository.close()
