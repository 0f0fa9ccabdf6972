"""
Document Schemas

Two groups of models live here:

- Document: the domain record passed between the store, the
  repositories and the workflow service (snake_case, never serialized
  directly).
- Response schemas: what the API returns, with camelCase JSON keys
  (ownerId, mimeType, uploadedAt, ...).
"""

from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


# ============================================================
# ENUMS - Typed Constants
# ============================================================
class ProcessingStatus(str, Enum):
    """
    Status of a single processing stage (OCR or summary).
    """
    PENDING = "pending"         # Stage never triggered
    PROCESSING = "processing"   # Stage is running right now
    COMPLETED = "completed"     # Stage finished, result stored
    FAILED = "failed"           # Stage failed, may be re-triggered


class DocumentStatus(str, Enum):
    """
    Overall document status. Always derived, never stored.
    """
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def compute_overall_status(
    extraction_status: ProcessingStatus,
    summary_status: ProcessingStatus,
) -> DocumentStatus:
    """
    Derive the overall status from the two stage statuses.

    processing beats failed, failed beats completed, and anything
    else (a stage still pending) reads as uploaded.

    A completed OCR re-run leaves an earlier failed summary in place,
    so the document stays failed until the summary is re-run.
    """
    stages = (extraction_status, summary_status)

    if ProcessingStatus.PROCESSING in stages:
        return DocumentStatus.PROCESSING
    if ProcessingStatus.FAILED in stages:
        return DocumentStatus.FAILED
    if all(stage == ProcessingStatus.COMPLETED for stage in stages):
        return DocumentStatus.COMPLETED
    return DocumentStatus.UPLOADED


# ============================================================
# DOMAIN MODEL - Used by Store / Service Layer
# ============================================================

class Document(BaseModel):
    """
    A stored document and its processing state.

    Upload-time fields (id, owner_id, filename, size_bytes, mime_type,
    uploaded_at, storage_locator) never change after creation; only the
    stage statuses and their texts are mutated.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    filename: str
    size_bytes: int = Field(..., ge=0)
    mime_type: str
    uploaded_at: datetime
    storage_locator: str

    extraction_status: ProcessingStatus = ProcessingStatus.PENDING
    extracted_text: Optional[str] = None
    summary_status: ProcessingStatus = ProcessingStatus.PENDING
    summary_text: Optional[str] = None

    @property
    def overall_status(self) -> DocumentStatus:
        return compute_overall_status(self.extraction_status, self.summary_status)

    @property
    def is_ready_for_summary(self) -> bool:
        """Summaries need a completed extraction with text to work on."""
        return (
            self.extraction_status == ProcessingStatus.COMPLETED
            and self.extracted_text is not None
        )


# ============================================================
# RESPONSE SCHEMAS - What API Returns to Clients
# ============================================================

class CamelModel(BaseModel):
    """Base for response schemas: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DocumentResponse(CamelModel):
    """
    Document data returned to API clients.

    Used by:
    - POST /docs/upload
    - GET /docs/{id}
    - GET /docs/history (each item)
    """
    id: str = Field(..., description="Unique document identifier")
    owner_id: str = Field(..., description="Identity of the uploader")
    filename: str = Field(
        ...,
        description="Original filename",
        examples=["invoice.png"]
    )
    size: int = Field(..., description="File size in bytes", examples=[48213])
    mime_type: str = Field(..., description="Detected MIME type", examples=["image/png"])
    uploaded_at: datetime = Field(..., description="Upload time (UTC)")
    overall_status: DocumentStatus = Field(
        ...,
        description="Derived from extraction and summary status"
    )
    extraction_status: ProcessingStatus
    extracted_text: Optional[str] = Field(
        None,
        description="Present once OCR has completed"
    )
    summary_status: ProcessingStatus
    summary_text: Optional[str] = Field(
        None,
        description="Present once summarization has completed"
    )

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResponse":
        return cls(
            id=document.id,
            owner_id=document.owner_id,
            filename=document.filename,
            size=document.size_bytes,
            mime_type=document.mime_type,
            uploaded_at=document.uploaded_at,
            overall_status=document.overall_status,
            extraction_status=document.extraction_status,
            extracted_text=document.extracted_text,
            summary_status=document.summary_status,
            summary_text=document.summary_text,
        )


class ExtractionResult(CamelModel):
    """Returned by POST /docs/{id}/ocr."""
    doc_id: str
    extracted_text: Optional[str] = None
    extraction_status: ProcessingStatus
    overall_status: DocumentStatus

    @classmethod
    def from_document(cls, document: Document) -> "ExtractionResult":
        return cls(
            doc_id=document.id,
            extracted_text=document.extracted_text,
            extraction_status=document.extraction_status,
            overall_status=document.overall_status,
        )


class SummaryResult(CamelModel):
    """Returned by POST /docs/{id}/summary."""
    doc_id: str
    summary_text: Optional[str] = None
    summary_status: ProcessingStatus
    overall_status: DocumentStatus

    @classmethod
    def from_document(cls, document: Document) -> "SummaryResult":
        return cls(
            doc_id=document.id,
            summary_text=document.summary_text,
            summary_status=document.summary_status,
            overall_status=document.overall_status,
        )


class Pagination(CamelModel):
    """
    Pagination block of the history response.
    """
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0, description="Total documents owned by the caller")

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return (self.total + self.limit - 1) // self.limit


class DocumentHistory(CamelModel):
    """Returned by GET /docs/history."""
    documents: List[DocumentResponse]
    pagination: Pagination


# ============================================================
# ENVELOPES
# ============================================================

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Success envelope: {success, message, data}.
    """
    success: bool = True
    message: str
    data: Optional[DataT] = None


class ErrorResponse(BaseModel):
    """
    Error envelope rendered by the application exception handlers.
    """
    success: bool = False
    message: str = Field(..., description="Human-readable error message")
    error: str = Field(..., description="Error kind, e.g. NotFound")
    timestamp: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "message": "Document not found",
                "error": "NotFound",
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
    )
