"""
Mock OCR backend, used when no OCR engine is configured.
"""

from typing import Optional

from app.ai.ocr.base import OCRBackend

MOCK_OCR_TEXT = (
    "This is a mock OCR result. In a real implementation, this would contain "
    "the actual text extracted from the document image."
)


class MockOCRBackend(OCRBackend):

    name = "mock"

    def is_configured(self) -> bool:
        return True

    async def extract_text(self, content: bytes, mime_type: Optional[str] = None) -> str:
        return MOCK_OCR_TEXT
