import base64
import io
import json
from pathlib import Path
from unittest.mock import AsyncMock
from urllib.parse import parse_qs

import httpx
import pytest

from app.ai.ocr import build_text_extraction_service
from app.ai.ocr.base import ExtractionError, TextExtractionService
from app.ai.ocr.google_vision import GoogleVisionBackend
from app.ai.ocr.mock import MOCK_OCR_TEXT, MockOCRBackend
from app.ai.ocr.ocr_space import OCRSpaceBackend
from tests.helpers import PNG_BYTES, make_settings


def _vision(handler) -> GoogleVisionBackend:
    return GoogleVisionBackend(
        api_key="vision-key",
        api_url="https://vision.test/v1/images:annotate",
        transport=httpx.MockTransport(handler),
    )


def _ocr_space(handler) -> OCRSpaceBackend:
    return OCRSpaceBackend(
        service_url="https://ocr.test/parse/image",
        api_key="space-key",
        transport=httpx.MockTransport(handler),
    )


class TestBackendSelection:
    def test_falls_back_to_mock(self, tmp_path: Path) -> None:
        service = build_text_extraction_service(make_settings(tmp_path))
        assert service.backend.name == "mock"

    def test_vision_preferred_over_ocr_space(self, tmp_path: Path) -> None:
        settings = make_settings(
            tmp_path,
            GOOGLE_VISION_API_KEY="vision-key",
            OCR_SERVICE_URL="https://ocr.test",
            OCR_API_KEY="space-key",
        )
        assert build_text_extraction_service(settings).backend.name == "google-vision"

    def test_ocr_space_needs_url_and_key(self, tmp_path: Path) -> None:
        only_url = make_settings(tmp_path, OCR_SERVICE_URL="https://ocr.test")
        both = make_settings(tmp_path, OCR_SERVICE_URL="https://ocr.test", OCR_API_KEY="k")

        assert build_text_extraction_service(only_url).backend.name == "mock"
        assert build_text_extraction_service(both).backend.name == "ocr-space"

    def test_no_backend_configured(self) -> None:
        unconfigured = OCRSpaceBackend(service_url=None, api_key=None)
        with pytest.raises(ValueError):
            TextExtractionService([unconfigured])


class TestMockBackend:
    async def test_returns_fixed_text(self) -> None:
        service = TextExtractionService([MockOCRBackend()])
        assert await service.extract(io.BytesIO(b"anything")) == MOCK_OCR_TEXT


class TestGoogleVision:
    async def test_joins_annotations(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.url.params["key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"responses": [{"textAnnotations": [
                {"description": "Hello World"},
                {"description": "Hello"},
                {"description": "World"},
            ]}]})

        service = TextExtractionService([_vision(handler)])
        text = await service.extract(io.BytesIO(PNG_BYTES), "image/png")

        assert text == "Hello World\nHello\nWorld"
        assert seen["key"] == "vision-key"
        request = seen["body"]["requests"][0]
        assert request["features"] == [{"type": "TEXT_DETECTION"}]
        assert base64.b64decode(request["image"]["content"]) == PNG_BYTES

    async def test_no_annotations_means_no_text(self) -> None:
        service = TextExtractionService([
            _vision(lambda request: httpx.Response(200, json={"responses": [{}]}))
        ])
        with pytest.raises(ExtractionError, match="no text detected"):
            await service.extract(b"img")

    async def test_upstream_error_message_is_surfaced(self) -> None:
        service = TextExtractionService([
            _vision(lambda request: httpx.Response(
                403, json={"error": {"code": 403, "message": "API key not valid"}}
            ))
        ])
        with pytest.raises(ExtractionError, match="API key not valid"):
            await service.extract(b"img")

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        service = TextExtractionService([_vision(handler)])
        with pytest.raises(ExtractionError, match="timed out"):
            await service.extract(b"img")

    async def test_undecodable_response(self) -> None:
        service = TextExtractionService([
            _vision(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))
        ])
        with pytest.raises(ExtractionError, match="decode"):
            await service.extract(b"img")


    async def test_plain_string_error(self) -> None:
        service = TextExtractionService([
            _vision(lambda request: httpx.Response(400, json={"error": "API key not valid"}))
        ])
        with pytest.raises(ExtractionError, match="API key not valid"):
            await service.extract(b"img")

    async def test_non_object_body(self) -> None:
        service = TextExtractionService([
            _vision(lambda request: httpx.Response(200, json=["unexpected"]))
        ])
        with pytest.raises(ExtractionError, match="unexpected response"):
            await service.extract(b"img")

    async def test_unexpected_backend_error_is_typed(self) -> None:
        backend = MockOCRBackend()
        backend.extract_text = AsyncMock(side_effect=KeyError("responses"))
        service = TextExtractionService([backend])

        with pytest.raises(ExtractionError, match="responses"):
            await service.extract(b"img")


class TestOCRSpace:
    async def test_returns_parsed_text(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={
                "ParsedResults": [{"ParsedText": "Invoice 42"}],
                "IsErroredOnProcessing": False,
            })

        service = TextExtractionService([_ocr_space(handler)])
        text = await service.extract(io.BytesIO(PNG_BYTES), "image/png")

        assert text == "Invoice 42"
        assert seen["form"]["apikey"] == ["space-key"]
        assert seen["form"]["language"] == ["eng"]
        assert seen["form"]["base64Image"][0].startswith("data:image/png;base64,")

    async def test_processing_error(self) -> None:
        service = TextExtractionService([
            _ocr_space(lambda request: httpx.Response(200, json={
                "IsErroredOnProcessing": True,
                "ErrorMessage": ["Unable to recognize the file type"],
            }))
        ])
        with pytest.raises(ExtractionError, match="Unable to recognize"):
            await service.extract(b"img")

    async def test_blank_text_is_failure(self) -> None:
        service = TextExtractionService([
            _ocr_space(lambda request: httpx.Response(200, json={
                "ParsedResults": [{"ParsedText": "   \n"}],
            }))
        ])
        with pytest.raises(ExtractionError, match="no text detected"):
            await service.extract(b"img")

    async def test_http_error(self) -> None:
        service = TextExtractionService([
            _ocr_space(lambda request: httpx.Response(500, json={}))
        ])
        with pytest.raises(ExtractionError, match="Failed to send OCR request"):
            await service.extract(b"img")
