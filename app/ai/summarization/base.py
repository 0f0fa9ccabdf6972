"""
Summary Backend Base Class

Summarization turns extracted text into a short summary. As with OCR,
the first configured backend is chosen once, when the service is built.
"""
from abc import ABC, abstractmethod
from typing import List
import logging

import httpx

logger = logging.getLogger(__name__)


class SummarizationError(Exception):
    """Summary failed: upstream error, timeout or empty response."""
    pass


class SummaryBackend(ABC):
    """
    Abstract base class for summary generators.
    """

    name: str = "summary"

    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """
        Summarize text.

        Backends truncate what they send upstream themselves; the
        caller's text is never modified.
        """
        pass

    async def close(self) -> None:
        return None


class SummarizationService:
    """
    Summarizes text with the first configured backend.
    """

    def __init__(self, backends: List[SummaryBackend]):
        configured = [backend for backend in backends if backend.is_configured()]
        if not configured:
            raise ValueError("No summary backend is configured")

        self.backend = configured[0]
        self._backends = backends
        logger.info(f"Summary backend selected: {self.backend.name}")

    async def summarize(self, text: str) -> str:
        """
        Raises:
            SummarizationError: On backend failure or an empty summary
        """
        try:
            summary = await self.backend.summarize(text)
        except SummarizationError:
            raise
        except httpx.TimeoutException:
            logger.error(f"Summary request timed out ({self.backend.name})")
            raise SummarizationError("Summary request timed out")
        except httpx.HTTPError as e:
            logger.error(f"Summary request failed ({self.backend.name}): {e}")
            raise SummarizationError(f"Failed to send summary request: {e}")
        except ValueError as e:
            logger.error(f"Summary response could not be decoded ({self.backend.name}): {e}")
            raise SummarizationError(f"Failed to decode summary response: {e}")
        except Exception as e:
            logger.exception(f"Summary backend {self.backend.name} failed unexpectedly")
            raise SummarizationError(f"Summary failed: {e}")

        summary = (summary or "").strip()
        if not summary:
            raise SummarizationError(f"no response from {self.backend.name}")

        logger.info(f"Summary generated with {self.backend.name}: {len(summary)} characters")
        return summary

    async def close(self) -> None:
        for backend in self._backends:
            await backend.close()
