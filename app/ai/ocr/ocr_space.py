"""
OCR.space Backend

Posts the file as a base64 data URI to the OCR.space parse endpoint.
"""

import base64
import logging
from typing import Optional

import httpx

from app.ai.ocr.base import OCRBackend, ExtractionError

logger = logging.getLogger(__name__)


class OCRSpaceBackend(OCRBackend):

    name = "ocr-space"

    def __init__(
        self,
        service_url: Optional[str],
        api_key: Optional[str],
        language: str = "eng",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_url = service_url
        self.api_key = api_key
        self.language = language
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def is_configured(self) -> bool:
        return bool(self.service_url and self.api_key)

    async def extract_text(self, content: bytes, mime_type: Optional[str] = None) -> str:
        encoded = base64.b64encode(content).decode("ascii")
        form = {
            "apikey": self.api_key,
            "language": self.language,
            "isOverlayRequired": "false",
            "base64Image": f"data:{mime_type or 'application/octet-stream'};base64,{encoded}",
        }

        response = await self._client.post(self.service_url, data=form)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ExtractionError("OCR.space returned an unexpected response")

        # ErrorMessage is a string or a list of strings depending on the failure
        error = data.get("ErrorMessage")
        if data.get("IsErroredOnProcessing") or error:
            if isinstance(error, list):
                error = "; ".join(str(item) for item in error)
            raise ExtractionError(f"OCR error: {error or 'processing failed'}")

        results = data.get("ParsedResults") or []
        if not results:
            raise ExtractionError("no text detected")

        return results[0].get("ParsedText", "")

    async def close(self) -> None:
        await self._client.aclose()
