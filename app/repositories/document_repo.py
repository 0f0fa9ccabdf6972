"""
Document Repository

Data access layer for DocumentRecord (SQLAlchemy async ORM).
"""

import logging
from typing import List, Optional
from datetime import timezone

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from app.db.database import check_db_connection, init_models
from app.models.document import DocumentRecord
from app.repositories.base import DocumentRepository
from app.repositories.memory_repo import MUTABLE_FIELDS
from app.schemas.document import Document

logger = logging.getLogger(__name__)


def _to_document(record: DocumentRecord) -> Document:
    """
    Convert an ORM row to the domain model.

    SQLite hands back naive datetimes; everything we store is UTC.
    """
    document = Document.model_validate(record)
    if document.uploaded_at.tzinfo is None:
        document.uploaded_at = document.uploaded_at.replace(tzinfo=timezone.utc)
    return document


class SqlDocumentRepository(DocumentRepository):
    """
    Repository for DocumentRecord.

    Opens one short session per operation, so a single instance is
    safe to share between concurrent requests.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        engine: Optional[AsyncEngine] = None
    ):
        """
        Args:
            session_factory: Async session factory bound to the engine
            engine: Disposed on close() when given
        """
        self._session_factory = session_factory
        self._engine = engine

    # ============================================================
    # QUERY METHODS - Reading Data
    # ============================================================

    async def get(self, document_id: str) -> Optional[Document]:
        async with self._session_factory() as session:
            record = await session.get(DocumentRecord, document_id)
            return _to_document(record) if record else None

    async def list_by_owner(
        self,
        owner_id: str,
        limit: int,
        offset: int = 0
    ) -> List[Document]:
        """
        Get a page of the owner's documents, newest first.
        """
        stmt = (
            select(DocumentRecord)
            .where(DocumentRecord.owner_id == owner_id)
            # created_at breaks ties between equal upload times
            .order_by(DocumentRecord.uploaded_at.desc(), DocumentRecord.created_at.desc())
            .offset(offset)
            .limit(limit)
        )

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_document(record) for record in result.scalars().all()]

    async def count_by_owner(self, owner_id: str) -> int:
        stmt = select(func.count(DocumentRecord.id)).where(
            DocumentRecord.owner_id == owner_id
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    # ============================================================
    # WRITE METHODS
    # ============================================================

    async def add(self, document: Document) -> None:
        record = DocumentRecord(
            id=document.id,
            owner_id=document.owner_id,
            filename=document.filename,
            size_bytes=document.size_bytes,
            mime_type=document.mime_type,
            uploaded_at=document.uploaded_at,
            storage_locator=document.storage_locator,
            extraction_status=document.extraction_status.value,
            extracted_text=document.extracted_text,
            summary_status=document.summary_status.value,
            summary_text=document.summary_text,
        )

        async with self._session_factory() as session:
            session.add(record)
            await session.commit()

        logger.debug(f"Document record inserted: {document.id}")

    async def update(self, document: Document) -> bool:
        """
        Update only the workflow columns; upload-time columns are
        never written after insert.
        """
        async with self._session_factory() as session:
            record = await session.get(DocumentRecord, document.id)
            if record is None:
                return False

            for field in MUTABLE_FIELDS:
                value = getattr(document, field)
                if hasattr(value, "value"):
                    value = value.value
                setattr(record, field, value)

            await session.commit()
            return True

    async def delete(self, document_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(DocumentRecord).where(DocumentRecord.id == document_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def ping(self) -> bool:
        if self._engine is None:
            return True
        return await check_db_connection(self._engine)

    async def create_tables(self) -> None:
        """Create the documents table without Alembic (DB_CREATE_TABLES, tests)."""
        if self._engine is None:
            raise RuntimeError("create_tables() needs the repository's engine")
        await init_models(self._engine)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
