from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.ai.ocr.base import TextExtractionService
from app.ai.ocr.mock import MockOCRBackend
from app.ai.summarization.base import SummarizationService
from app.ai.summarization.mock import MockSummaryBackend
from app.core.config import Settings
from app.main import create_app
from app.repositories.memory_repo import InMemoryDocumentRepository
from app.services.auth_service import AuthService
from app.services.document_service import DocumentService
from app.services.document_store import DocumentStore
from app.storage.memory import InMemoryStorage
from tests.helpers import OTHER_OWNER, OWNER, bearer, make_settings


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def repository() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()


@pytest.fixture
def store(storage: InMemoryStorage, repository: InMemoryDocumentRepository) -> DocumentStore:
    return DocumentStore(storage, repository)


@pytest.fixture
def document_service(store: DocumentStore, test_settings: Settings) -> DocumentService:
    return DocumentService(
        store=store,
        extraction_service=TextExtractionService([MockOCRBackend()]),
        summarization_service=SummarizationService([MockSummaryBackend()]),
        settings=test_settings,
    )


@pytest.fixture
def app(document_service: DocumentService, test_settings: Settings) -> FastAPI:
    return create_app(
        settings=test_settings,
        document_service=document_service,
        auth_service=AuthService(test_settings),
    )


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return bearer(OWNER)


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    return bearer(OTHER_OWNER)
