"""
OpenAI Summary Backend

Chat-completions call over plain HTTP (httpx), so no SDK is needed
and any OpenAI-compatible endpoint can be used via OPENAI_API_URL.
"""

import logging
from typing import Optional

import httpx

from app.ai.prompts.summary_prompts import (
    OPENAI_MAX_INPUT_CHARS,
    build_summary_system_prompt,
    build_summary_user_prompt,
    truncate_for_prompt,
)
from app.ai.summarization.base import SummaryBackend, SummarizationError

logger = logging.getLogger(__name__)


class OpenAISummaryBackend(SummaryBackend):

    name = "openai"

    def __init__(
        self,
        api_url: Optional[str],
        api_key: Optional[str],
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 150,
        temperature: float = 0.3,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_key)

    async def summarize(self, text: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": build_summary_system_prompt()},
                {
                    "role": "user",
                    "content": build_summary_user_prompt(
                        truncate_for_prompt(text, OPENAI_MAX_INPUT_CHARS)
                    ),
                },
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        response = await self._client.post(
            self.api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        data = response.json()
        if not isinstance(data, dict):
            response.raise_for_status()
            raise SummarizationError("OpenAI returned an unexpected response")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise SummarizationError(f"OpenAI error: {message}")
        response.raise_for_status()

        choices = data.get("choices") or []
        if not choices:
            raise SummarizationError("no response from OpenAI")

        return (choices[0].get("message") or {}).get("content") or ""

    async def close(self) -> None:
        await self._client.aclose()
