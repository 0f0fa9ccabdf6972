"""
Mock summary backend, used when no LLM is configured.

The summary only depends on the word count of the input.
"""

from app.ai.summarization.base import SummaryBackend

SHORT_SUMMARY = "This is a short document with minimal content."
MODERATE_SUMMARY = (
    "This document contains moderate content that has been processed for summarization."
)
COMPREHENSIVE_SUMMARY = (
    "This is a comprehensive document with substantial content that has been "
    "analyzed and summarized for easy understanding."
)


class MockSummaryBackend(SummaryBackend):

    name = "mock"

    def is_configured(self) -> bool:
        return True

    async def summarize(self, text: str) -> str:
        word_count = len(text.split())

        if word_count < 10:
            return SHORT_SUMMARY
        elif word_count < 50:
            return MODERATE_SUMMARY
        return COMPREHENSIVE_SUMMARY
