"""
Document Endpoints

HTTP API for documents: upload, OCR, summary, history, download, delete.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    status,
    Query,
    Response,
    UploadFile,
    File,
)
from fastapi.responses import StreamingResponse

from app.api.deps import get_current_user_id, get_document_service
from app.ai.ocr.base import ExtractionError
from app.ai.summarization.base import SummarizationError
from app.schemas.document import (
    ApiResponse,
    DocumentHistory,
    DocumentResponse,
    ErrorResponse,
    ExtractionResult,
    SummaryResult,
)
from app.services.document_service import DocumentService
from app.services.errors import (
    ContentUnavailableError,
    DocumentNotFoundError,
    DocumentValidationError,
    FileTooLargeError,
    PreconditionFailedError,
    StorageWriteError,
)

logger = logging.getLogger(__name__)

# ============================================================
# Router Setup
# ============================================================

router = APIRouter(tags=["Documents"])

NOT_FOUND_RESPONSE = {"description": "Document not found (or owned by someone else)", "model": ErrorResponse}
UNAUTHORIZED_RESPONSE = {"description": "Missing or invalid bearer token", "model": ErrorResponse}
SERVER_ERROR_RESPONSE = {"description": "Storage or processing failure", "model": ErrorResponse}


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Document not found"
    )


# ============================================================
# UPLOAD ENDPOINT
# ============================================================

@router.post(
    "/upload",
    response_model=ApiResponse[DocumentResponse],
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a document",
    description="""
    Upload a file as multipart form data (field `file`).

    The document starts as `uploaded`, with OCR and summary `pending`.
    """,
    responses={
        400: {"description": "File missing or empty", "model": ErrorResponse},
        401: UNAUTHORIZED_RESPONSE,
        413: {"description": "File too large", "model": ErrorResponse},
        500: SERVER_ERROR_RESPONSE,
    },
)
async def upload_document(
    file: Optional[UploadFile] = File(
        None,
        description="Document file to upload"
    ),
    owner_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
):
    try:
        document = await service.upload_document(owner_id=owner_id, file=file)

    except FileTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(e)
        )
    except DocumentValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except StorageWriteError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload document: {e}"
        )

    return ApiResponse[DocumentResponse](
        message="Document uploaded successfully",
        data=DocumentResponse.from_document(document),
    )


# ============================================================
# LIST ENDPOINT
# Registered before /{doc_id} so "history" isn't taken for an id
# ============================================================

@router.get(
    "/history",
    response_model=ApiResponse[DocumentHistory],
    response_model_by_alias=True,
    summary="List your documents",
    responses={
        400: {"description": "Invalid page or limit", "model": ErrorResponse},
        401: UNAUTHORIZED_RESPONSE,
        500: SERVER_ERROR_RESPONSE,
    },
)
async def get_history(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(20, ge=1, le=100, description="Documents per page"),
    owner_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
):
    """
    Documents owned by the caller, newest upload first.
    """
    history = await service.list_documents(owner_id=owner_id, page=page, limit=limit)

    return ApiResponse[DocumentHistory](
        message="Document history retrieved successfully",
        data=history,
    )


# ============================================================
# PROCESSING ENDPOINTS
# ============================================================

@router.post(
    "/{doc_id}/ocr",
    response_model=ApiResponse[ExtractionResult],
    response_model_by_alias=True,
    summary="Run OCR on a document",
    responses={
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        500: SERVER_ERROR_RESPONSE,
    },
)
async def process_ocr(
    doc_id: str,
    owner_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
):
    """
    Extract text from the document. Runs inline; the response carries
    the extracted text.
    """
    try:
        document = await service.trigger_extraction(doc_id, owner_id)

    except DocumentNotFoundError:
        raise _not_found()
    except ContentUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read document file"
        )
    except ExtractionError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"OCR processing failed: {e}"
        )
    except StorageWriteError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update document status"
        )

    return ApiResponse[ExtractionResult](
        message="OCR processing completed successfully",
        data=ExtractionResult.from_document(document),
    )


@router.post(
    "/{doc_id}/summary",
    response_model=ApiResponse[SummaryResult],
    response_model_by_alias=True,
    summary="Generate a summary",
    responses={
        400: {"description": "OCR not completed yet", "model": ErrorResponse},
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        500: SERVER_ERROR_RESPONSE,
    },
)
async def generate_summary(
    doc_id: str,
    owner_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
):
    """
    Summarize the extracted text. OCR must have completed first.
    """
    try:
        document = await service.trigger_summarization(doc_id, owner_id)

    except DocumentNotFoundError:
        raise _not_found()
    except PreconditionFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except SummarizationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Summary generation failed: {e}"
        )
    except StorageWriteError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update document status"
        )

    return ApiResponse[SummaryResult](
        message="Summary generation completed successfully",
        data=SummaryResult.from_document(document),
    )


# ============================================================
# SINGLE DOCUMENT ENDPOINTS
# ============================================================

@router.get(
    "/{doc_id}",
    response_model=ApiResponse[DocumentResponse],
    response_model_by_alias=True,
    summary="Get document details",
    responses={
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
)
async def get_document(
    doc_id: str,
    owner_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
):
    try:
        document = await service.get_document(doc_id, owner_id)
    except DocumentNotFoundError:
        raise _not_found()

    return ApiResponse[DocumentResponse](
        message="Document details retrieved successfully",
        data=DocumentResponse.from_document(document),
    )


@router.get(
    "/{doc_id}/content",
    summary="Download the original file",
    response_class=StreamingResponse,
    responses={
        200: {"description": "The original bytes"},
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        500: SERVER_ERROR_RESPONSE,
    },
)
async def download_document(
    doc_id: str,
    owner_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
):
    try:
        stream, filename, mime_type = await service.get_document_content(doc_id, owner_id)
    except DocumentNotFoundError:
        raise _not_found()
    except ContentUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read document file"
        )

    return StreamingResponse(
        stream,
        media_type=mime_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
    )


@router.delete(
    "/{doc_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a document",
    responses={
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
)
async def delete_document(
    doc_id: str,
    owner_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
):
    """
    Delete the document record and its stored file.
    """
    try:
        await service.delete_document(doc_id, owner_id)
    except DocumentNotFoundError:
        raise _not_found()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
