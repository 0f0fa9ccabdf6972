"""
Base Repository

Abstract interface for document metadata persistence.

Implementations:
- InMemoryDocumentRepository: process memory (tests, local runs)
- SqlDocumentRepository: SQLAlchemy async ORM
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from app.schemas.document import Document


class DocumentRepository(ABC):
    """
    Metadata persistence for documents.

    Repositories don't enforce ownership; the document store does.
    All methods return fresh Document copies, so callers may mutate
    what they get without touching stored state.
    """

    @abstractmethod
    async def add(self, document: Document) -> None:
        """Insert a new record."""
        pass

    @abstractmethod
    async def get(self, document_id: str) -> Optional[Document]:
        pass

    @abstractmethod
    async def list_by_owner(
        self,
        owner_id: str,
        limit: int,
        offset: int = 0
    ) -> List[Document]:
        """Documents of one owner, newest uploaded_at first."""
        pass

    @abstractmethod
    async def count_by_owner(self, owner_id: str) -> int:
        pass

    @abstractmethod
    async def update(self, document: Document) -> bool:
        """
        Replace the mutable fields (statuses and texts) of a record.

        Returns:
            False if no record with this id exists
        """
        pass

    @abstractmethod
    async def delete(self, document_id: str) -> bool:
        """
        Returns:
            True if a record was removed
        """
        pass

    async def ping(self) -> bool:
        """Health check. In-process repositories are always reachable."""
        return True

    async def close(self) -> None:
        """Release connections. Called during shutdown."""
        return None
