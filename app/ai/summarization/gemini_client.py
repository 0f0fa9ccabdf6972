"""
Google Gemini Summary Backend

Integration with Google's Gemini API using the google-genai package.
"""

import logging
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.ai.prompts.summary_prompts import (
    GEMINI_MAX_INPUT_CHARS,
    build_gemini_summary_prompt,
    truncate_for_prompt,
)
from app.ai.summarization.base import SummaryBackend, SummarizationError

logger = logging.getLogger(__name__)


class GeminiSummaryBackend(SummaryBackend):

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        max_tokens: int = 150,
        temperature: float = 0.3,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._client: Optional[genai.Client] = None

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_client(self) -> genai.Client:
        """Get or create the Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise SummarizationError(
                    "GEMINI_API_KEY not set. "
                    "Get your free key at https://aistudio.google.com/apikey"
                )

            self._client = genai.Client(
                api_key=self.api_key,
                # HttpOptions timeout is in milliseconds
                http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
            )
            logger.info(f"Gemini client initialized (model: {self.model})")

        return self._client

    async def summarize(self, text: str) -> str:
        client = self.get_client()

        prompt = build_gemini_summary_prompt(
            truncate_for_prompt(text, GEMINI_MAX_INPUT_CHARS)
        )

        config = types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
        )

        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error: {e}")
            raise SummarizationError(f"Gemini error: {e.message or e}")

        if not response.text:
            raise SummarizationError("no response from Gemini")

        return response.text

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None

