"""
OCR Module

Text extraction backends and the service that picks one.

Selection order (first configured wins):
1. Google Vision   (GOOGLE_VISION_API_KEY)
2. OCR.space       (OCR_SERVICE_URL + OCR_API_KEY)
3. Mock            (always available)

Usage:
------
    from app.ai.ocr import build_text_extraction_service

    service = build_text_extraction_service(settings)
    text = await service.extract(stream, "image/png")
"""

from app.core.config import Settings
from app.ai.ocr.base import (
    ExtractionError,
    OCRBackend,
    TextExtractionService,
)
from app.ai.ocr.google_vision import GoogleVisionBackend
from app.ai.ocr.ocr_space import OCRSpaceBackend
from app.ai.ocr.mock import MockOCRBackend, MOCK_OCR_TEXT


def build_text_extraction_service(settings: Settings) -> TextExtractionService:
    """Build the extraction service from settings."""
    timeout = settings.BACKEND_TIMEOUT_SECONDS

    return TextExtractionService([
        GoogleVisionBackend(
            api_key=settings.GOOGLE_VISION_API_KEY,
            api_url=settings.GOOGLE_VISION_API_URL,
            timeout=timeout,
        ),
        OCRSpaceBackend(
            service_url=settings.OCR_SERVICE_URL,
            api_key=settings.OCR_API_KEY,
            language=settings.OCR_LANGUAGE,
            timeout=timeout,
        ),
        MockOCRBackend(),
    ])


__all__ = [
    "build_text_extraction_service",
    "ExtractionError",
    "OCRBackend",
    "TextExtractionService",
    "GoogleVisionBackend",
    "OCRSpaceBackend",
    "MockOCRBackend",
    "MOCK_OCR_TEXT",
]
