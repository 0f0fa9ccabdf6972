"""
Summarization Module

Selection order (first configured wins):
1. OpenAI   (OPENAI_API_URL + OPENAI_API_KEY)
2. Gemini   (GEMINI_API_KEY)
3. Mock     (always available)
"""

from app.core.config import Settings
from app.ai.summarization.base import (
    SummarizationError,
    SummarizationService,
    SummaryBackend,
)
from app.ai.summarization.openai_client import OpenAISummaryBackend
from app.ai.summarization.gemini_client import GeminiSummaryBackend
from app.ai.summarization.mock import MockSummaryBackend


def build_summarization_service(settings: Settings) -> SummarizationService:
    """Build the summarization service from settings."""
    return SummarizationService([
        OpenAISummaryBackend(
            api_url=settings.OPENAI_API_URL,
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            max_tokens=settings.SUMMARY_MAX_TOKENS,
            temperature=settings.SUMMARY_TEMPERATURE,
            timeout=settings.BACKEND_TIMEOUT_SECONDS,
        ),
        GeminiSummaryBackend(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            max_tokens=settings.SUMMARY_MAX_TOKENS,
            temperature=settings.SUMMARY_TEMPERATURE,
            timeout=settings.BACKEND_TIMEOUT_SECONDS,
        ),
        MockSummaryBackend(),
    ])


__all__ = [
    "build_summarization_service",
    "SummarizationError",
    "SummarizationService",
    "SummaryBackend",
    "OpenAISummaryBackend",
    "GeminiSummaryBackend",
    "MockSummaryBackend",
]
