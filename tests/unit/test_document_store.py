from unittest.mock import AsyncMock

import pytest

from app.repositories.memory_repo import InMemoryDocumentRepository
from app.schemas.document import ProcessingStatus
from app.services.document_store import DocumentStore
from app.services.errors import (
    ContentUnavailableError,
    DocumentNotFoundError,
    StorageWriteError,
)
from app.storage.base import FileNotFoundError as StorageFileNotFoundError
from app.storage.base import StorageError
from app.storage.memory import InMemoryStorage
from tests.helpers import OTHER_OWNER, OWNER


async def _create(store: DocumentStore, owner_id: str = OWNER, content: bytes = b"hello world"):
    return await store.create(
        owner_id=owner_id,
        content=content,
        filename="notes.txt",
        mime_type="text/plain",
        size=len(content),
    )


class TestCreate:
    async def test_create_persists_bytes_and_metadata(
        self, store: DocumentStore, storage: InMemoryStorage
    ) -> None:
        doc = await _create(store)

        assert doc.owner_id == OWNER
        assert doc.size_bytes == 11
        assert doc.uploaded_at.tzinfo is not None
        assert doc.extraction_status == ProcessingStatus.PENDING
        assert doc.summary_status == ProcessingStatus.PENDING
        assert doc.storage_locator == f"users/{OWNER}/documents/{doc.id}.txt"
        assert await storage.get(doc.storage_locator) == b"hello world"
        assert (await store.get(doc.id, OWNER)).id == doc.id

    async def test_ids_are_unique(self, store: DocumentStore) -> None:
        first = await _create(store)
        second = await _create(store)
        assert first.id != second.id

    async def test_storage_failure_raises_and_leaves_no_record(
        self, store: DocumentStore, storage: InMemoryStorage
    ) -> None:
        storage.save = AsyncMock(side_effect=StorageError("disk full"))

        with pytest.raises(StorageWriteError):
            await _create(store)

        assert await store.count(OWNER) == 0

    async def test_metadata_failure_rolls_back_bytes(self, storage: InMemoryStorage) -> None:
        repository = InMemoryDocumentRepository()
        repository.add = AsyncMock(side_effect=RuntimeError("db down"))
        store = DocumentStore(storage, repository)

        with pytest.raises(StorageWriteError):
            await _create(store)

        assert storage._files == {}


class TestReadAndOwnership:
    async def test_other_owner_sees_not_found(self, store: DocumentStore) -> None:
        doc = await _create(store)

        with pytest.raises(DocumentNotFoundError) as exc_info:
            await store.get(doc.id, OTHER_OWNER)
        with pytest.raises(DocumentNotFoundError) as missing_info:
            await store.get("does-not-exist", OTHER_OWNER)

        assert str(exc_info.value) == str(missing_info.value)

    async def test_list_and_count_are_owner_scoped(self, store: DocumentStore) -> None:
        await _create(store)
        await _create(store)
        await _create(store, owner_id=OTHER_OWNER)

        assert await store.count(OWNER) == 2
        assert len(await store.list(OWNER, limit=10)) == 2
        assert len(await store.list(OTHER_OWNER, limit=10)) == 1

    async def test_open_content(self, store: DocumentStore) -> None:
        doc = await _create(store)
        stream = await store.open_content(doc)
        assert stream.read() == b"hello world"

    async def test_open_content_missing_bytes(
        self, store: DocumentStore, storage: InMemoryStorage
    ) -> None:
        doc = await _create(store)
        await storage.delete(doc.storage_locator)

        with pytest.raises(ContentUnavailableError):
            await store.open_content(doc)


class TestUpdate:
    async def test_update_persists_workflow_fields(self, store: DocumentStore) -> None:
        doc = await _create(store)
        doc.extraction_status = ProcessingStatus.COMPLETED
        doc.extracted_text = "hello"

        await store.update(doc)

        stored = await store.get(doc.id, OWNER)
        assert stored.extraction_status == ProcessingStatus.COMPLETED
        assert stored.extracted_text == "hello"

    async def test_update_deleted_document(self, store: DocumentStore) -> None:
        doc = await _create(store)
        await store.delete(doc.id, OWNER)

        with pytest.raises(DocumentNotFoundError):
            await store.update(doc)

    async def test_update_repository_failure(self, store: DocumentStore, repository) -> None:
        doc = await _create(store)
        repository.update = AsyncMock(side_effect=RuntimeError("db down"))

        with pytest.raises(StorageWriteError):
            await store.update(doc)


class TestDelete:
    async def test_delete_removes_record_and_bytes(
        self, store: DocumentStore, storage: InMemoryStorage
    ) -> None:
        doc = await _create(store)

        await store.delete(doc.id, OWNER)

        with pytest.raises(StorageFileNotFoundError):
            await storage.get(doc.storage_locator)
        with pytest.raises(DocumentNotFoundError):
            await store.get(doc.id, OWNER)
        with pytest.raises(DocumentNotFoundError):
            await store.delete(doc.id, OWNER)

    async def test_delete_by_other_owner(self, store: DocumentStore) -> None:
        doc = await _create(store)

        with pytest.raises(DocumentNotFoundError):
            await store.delete(doc.id, OTHER_OWNER)

        assert (await store.get(doc.id, OWNER)).id == doc.id

    async def test_storage_failure_still_deletes_record(
        self, store: DocumentStore, storage: InMemoryStorage
    ) -> None:
        doc = await _create(store)
        storage.delete = AsyncMock(side_effect=StorageError("unreachable"))

        await store.delete(doc.id, OWNER)

        with pytest.raises(DocumentNotFoundError):
            await store.get(doc.id, OWNER)

    async def test_missing_bytes_still_deletes_record(
        self, store: DocumentStore, storage: InMemoryStorage
    ) -> None:
        doc = await _create(store)
        await storage.delete(doc.storage_locator)

        await store.delete(doc.id, OWNER)

        assert await store.count(OWNER) == 0
