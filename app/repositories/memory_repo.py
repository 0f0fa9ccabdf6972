"""
In-Memory Document Repository

Dict-backed metadata store. Contents are lost on restart.
"""

import itertools
import threading
from typing import Dict, List, Optional, Tuple

from app.repositories.base import DocumentRepository
from app.schemas.document import Document

# Fields the workflow is allowed to change after creation
MUTABLE_FIELDS = (
    "extraction_status",
    "extracted_text",
    "summary_status",
    "summary_text",
)


class InMemoryDocumentRepository(DocumentRepository):
    """
    Repository keeping deep copies of documents in a dict.

    The lock guards only dict access and is never held across an await.
    Each record carries an insertion sequence so documents uploaded in
    the same instant still list newest first.
    """

    def __init__(self):
        self._documents: Dict[str, Tuple[int, Document]] = {}
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    async def add(self, document: Document) -> None:
        with self._lock:
            if document.id in self._documents:
                raise ValueError(f"Document already exists: {document.id}")
            self._documents[document.id] = (
                next(self._sequence),
                document.model_copy(deep=True),
            )

    async def get(self, document_id: str) -> Optional[Document]:
        with self._lock:
            entry = self._documents.get(document_id)
        if entry is None:
            return None
        return entry[1].model_copy(deep=True)

    async def list_by_owner(
        self,
        owner_id: str,
        limit: int,
        offset: int = 0
    ) -> List[Document]:
        with self._lock:
            owned = [
                entry for entry in self._documents.values()
                if entry[1].owner_id == owner_id
            ]

        owned.sort(key=lambda entry: (entry[1].uploaded_at, entry[0]), reverse=True)
        return [doc.model_copy(deep=True) for _, doc in owned[offset:offset + limit]]

    async def count_by_owner(self, owner_id: str) -> int:
        with self._lock:
            return sum(
                1 for _, doc in self._documents.values()
                if doc.owner_id == owner_id
            )

    async def update(self, document: Document) -> bool:
        changes = {field: getattr(document, field) for field in MUTABLE_FIELDS}

        with self._lock:
            entry = self._documents.get(document.id)
            if entry is None:
                return False
            sequence, stored = entry
            self._documents[document.id] = (
                sequence,
                stored.model_copy(update=changes, deep=True),
            )
        return True

    async def delete(self, document_id: str) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None
