import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from app.ai.prompts.summary_prompts import (
    GEMINI_MAX_INPUT_CHARS,
    OPENAI_MAX_INPUT_CHARS,
    truncate_for_prompt,
)
from app.ai.summarization import build_summarization_service
from app.ai.summarization.base import SummarizationError, SummarizationService
from app.ai.summarization.gemini_client import GeminiSummaryBackend
from app.ai.summarization.mock import (
    COMPREHENSIVE_SUMMARY,
    MODERATE_SUMMARY,
    SHORT_SUMMARY,
    MockSummaryBackend,
)
from app.ai.summarization.openai_client import OpenAISummaryBackend
from tests.helpers import make_settings


def _openai(handler) -> OpenAISummaryBackend:
    return OpenAISummaryBackend(
        api_url="https://llm.test/v1/chat/completions",
        api_key="sk-test",
        model="gpt-3.5-turbo",
        transport=httpx.MockTransport(handler),
    )


def _completion(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class TestTruncation:
    def test_short_text_unchanged(self) -> None:
        assert truncate_for_prompt("abc", 10) == "abc"

    def test_long_text_cut_and_marked(self) -> None:
        assert truncate_for_prompt("a" * 12, 10) == "a" * 10 + "..."


class TestBackendSelection:
    def test_falls_back_to_mock(self, tmp_path: Path) -> None:
        assert build_summarization_service(make_settings(tmp_path)).backend.name == "mock"

    def test_openai_preferred_over_gemini(self, tmp_path: Path) -> None:
        settings = make_settings(tmp_path, OPENAI_API_KEY="sk", GEMINI_API_KEY="g")
        assert build_summarization_service(settings).backend.name == "openai"

    def test_gemini_when_only_gemini_key(self, tmp_path: Path) -> None:
        settings = make_settings(tmp_path, GEMINI_API_KEY="g")
        assert build_summarization_service(settings).backend.name == "gemini"


class TestMockBackend:
    @pytest.mark.parametrize(
        "words, expected",
        [(1, SHORT_SUMMARY), (9, SHORT_SUMMARY), (10, MODERATE_SUMMARY),
         (49, MODERATE_SUMMARY), (50, COMPREHENSIVE_SUMMARY)],
    )
    async def test_summary_depends_on_word_count(self, words, expected) -> None:
        service = SummarizationService([MockSummaryBackend()])
        assert await service.summarize(" ".join(["word"] * words)) == expected


class TestOpenAI:
    async def test_request_shape_and_truncation(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return _completion("  A short summary.  ")

        service = SummarizationService([_openai(handler)])
        summary = await service.summarize("x" * (OPENAI_MAX_INPUT_CHARS + 500))

        assert summary == "A short summary."
        assert seen["auth"] == "Bearer sk-test"
        body = seen["body"]
        assert body["model"] == "gpt-3.5-turbo"
        assert body["max_tokens"] == 150
        assert body["temperature"] == 0.3
        assert [m["role"] for m in body["messages"]] == ["system", "user"]
        user_prompt = body["messages"][1]["content"]
        assert "x" * OPENAI_MAX_INPUT_CHARS + "..." in user_prompt
        assert "x" * (OPENAI_MAX_INPUT_CHARS + 1) not in user_prompt

    async def test_upstream_error_is_surfaced(self) -> None:
        service = SummarizationService([
            _openai(lambda request: httpx.Response(
                401, json={"error": {"message": "Incorrect API key provided"}}
            ))
        ])
        with pytest.raises(SummarizationError, match="Incorrect API key"):
            await service.summarize("some text")

    async def test_no_choices(self) -> None:
        service = SummarizationService([
            _openai(lambda request: httpx.Response(200, json={"choices": []}))
        ])
        with pytest.raises(SummarizationError, match="no response"):
            await service.summarize("some text")

    async def test_blank_content(self) -> None:
        service = SummarizationService([_openai(lambda request: _completion("   "))])
        with pytest.raises(SummarizationError, match="no response from openai"):
            await service.summarize("some text")

    async def test_non_object_error_body(self) -> None:
        service = SummarizationService([
            _openai(lambda request: httpx.Response(502, json=["bad gateway"]))
        ])
        with pytest.raises(SummarizationError):
            await service.summarize("some text")

    async def test_non_object_success_body(self) -> None:
        service = SummarizationService([
            _openai(lambda request: httpx.Response(200, json=["choices"]))
        ])
        with pytest.raises(SummarizationError, match="unexpected response"):
            await service.summarize("some text")

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow", request=request)

        service = SummarizationService([_openai(handler)])
        with pytest.raises(SummarizationError, match="timed out"):
            await service.summarize("some text")


class TestGemini:
    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(return_value=MagicMock(text="Gemini summary."))
        with patch("app.ai.summarization.gemini_client.genai.Client", return_value=client):
            yield client

    async def test_generates_summary(self, client) -> None:
        service = SummarizationService([GeminiSummaryBackend(api_key="g", model="gemini-2.5-flash")])

        assert await service.summarize("y" * (GEMINI_MAX_INPUT_CHARS + 10)) == "Gemini summary."

        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"].endswith("y" * GEMINI_MAX_INPUT_CHARS + "...")
        assert kwargs["config"].max_output_tokens == 150

    async def test_api_error(self, client) -> None:
        client.aio.models.generate_content.side_effect = genai_errors.APIError(
            503, {"error": {"code": 503, "message": "model overloaded", "status": "UNAVAILABLE"}}
        )
        service = SummarizationService([GeminiSummaryBackend(api_key="g")])

        with pytest.raises(SummarizationError, match="model overloaded"):
            await service.summarize("some text")

    async def test_empty_response(self, client) -> None:
        client.aio.models.generate_content.return_value = MagicMock(text=None)
        service = SummarizationService([GeminiSummaryBackend(api_key="g")])

        with pytest.raises(SummarizationError, match="no response"):
            await service.summarize("some text")

    async def test_unexpected_sdk_error_is_typed(self, client) -> None:
        client.aio.models.generate_content.side_effect = RuntimeError("connection reset")
        service = SummarizationService([GeminiSummaryBackend(api_key="g")])

        with pytest.raises(SummarizationError, match="connection reset"):
            await service.summarize("some text")

    async def test_close_releases_async_client(self, client) -> None:
        client.aio.aclose = AsyncMock()
        backend = GeminiSummaryBackend(api_key="g")
        backend.get_client()

        await backend.close()
        await backend.close()

        client.aio.aclose.assert_awaited_once()
