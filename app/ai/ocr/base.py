"""
OCR Backend Base Class

Text extraction turns a document's bytes into plain text. Several
engines are supported behind one interface; the service picks the
first configured one when it is built and keeps it for its lifetime.
"""
from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional, Union
import logging

import httpx

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """
    OCR failed: upstream error, timeout, undecodable response or no text.

    The message is shown to API clients, so it carries the upstream
    reason when there is one.
    """
    pass


class OCRBackend(ABC):
    """
    Abstract base class for OCR engines.

    Backends may raise ExtractionError directly; httpx errors and
    malformed JSON are translated by TextExtractionService.
    """

    name: str = "ocr"

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the credentials this backend needs are present."""
        pass

    @abstractmethod
    async def extract_text(self, content: bytes, mime_type: Optional[str] = None) -> str:
        """
        Extract text from raw file bytes.

        Args:
            content: Raw file bytes
            mime_type: MIME type of the file, when known
        """
        pass

    async def close(self) -> None:
        """Release HTTP clients. Called during shutdown."""
        return None


class TextExtractionService:
    """
    Extracts text with the first configured backend.

    Usage:
        service = TextExtractionService([vision, ocr_space, mock])
        text = await service.extract(stream, "image/png")
    """

    def __init__(self, backends: List[OCRBackend]):
        configured = [backend for backend in backends if backend.is_configured()]
        if not configured:
            raise ValueError("No OCR backend is configured")

        self.backend = configured[0]
        self._backends = backends
        logger.info(f"OCR backend selected: {self.backend.name}")

    async def extract(
        self,
        stream: Union[bytes, BinaryIO],
        mime_type: Optional[str] = None
    ) -> str:
        """
        Extract text from a document.

        Raises:
            ExtractionError: On any backend failure or when no text
                was found
        """
        content = stream if isinstance(stream, (bytes, bytearray)) else stream.read()

        try:
            text = await self.backend.extract_text(content, mime_type)
        except ExtractionError:
            raise
        except httpx.TimeoutException:
            logger.error(f"OCR request timed out ({self.backend.name})")
            raise ExtractionError("OCR request timed out")
        except httpx.HTTPError as e:
            logger.error(f"OCR request failed ({self.backend.name}): {e}")
            raise ExtractionError(f"Failed to send OCR request: {e}")
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"OCR response could not be decoded ({self.backend.name}): {e}")
            raise ExtractionError(f"Failed to decode OCR response: {e}")
        except Exception as e:
            logger.exception(f"OCR backend {self.backend.name} failed unexpectedly")
            raise ExtractionError(f"OCR failed: {e}")

        if not text or not text.strip():
            raise ExtractionError("no text detected")

        logger.info(f"OCR completed with {self.backend.name}: {len(text)} characters")
        return text

    async def close(self) -> None:
        for backend in self._backends:
            await backend.close()
