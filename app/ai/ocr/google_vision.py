"""
Google Cloud Vision OCR

Calls the Vision REST API (images:annotate) with TEXT_DETECTION,
authenticated by API key.
"""

import base64
import logging
from typing import Optional

import httpx

from app.ai.ocr.base import OCRBackend, ExtractionError

logger = logging.getLogger(__name__)


class GoogleVisionBackend(OCRBackend):

    name = "google-vision"

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://vision.googleapis.com/v1/images:annotate",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def extract_text(self, content: bytes, mime_type: Optional[str] = None) -> str:
        payload = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(content).decode("ascii")},
                    "features": [{"type": "TEXT_DETECTION"}],
                }
            ]
        }

        response = await self._client.post(
            self.api_url,
            params={"key": self.api_key},
            json=payload,
        )
        data = response.json()
        if not isinstance(data, dict):
            response.raise_for_status()
            raise ExtractionError("Google Vision returned an unexpected response")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ExtractionError(f"Google Vision error: {message or response.status_code}")
        response.raise_for_status()

        responses = data.get("responses") or []
        if not responses:
            raise ExtractionError("no text detected")

        first = responses[0] if isinstance(responses[0], dict) else {}
        error = first.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ExtractionError(f"Google Vision error: {message}")

        annotations = first.get("textAnnotations") or []
        if not annotations:
            raise ExtractionError("no text detected")

        # The first annotation is the full text, the rest are single words
        return "\n".join(annotation.get("description", "") for annotation in annotations)

    async def close(self) -> None:
        await self._client.aclose()
