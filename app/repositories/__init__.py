from app.core.config import Settings
from app.repositories.base import DocumentRepository
from app.repositories.memory_repo import InMemoryDocumentRepository


def get_document_repository(settings: Settings) -> DocumentRepository:
    """
    Build the metadata repository from settings.

    SQL when DATABASE_URL is set, process memory otherwise. Cloud
    storage can't be paired with in-memory metadata: the bytes would
    outlive their records on restart.

    Raises:
        ValueError: STORAGE_BACKEND=cloud without DATABASE_URL
    """
    if not settings.DATABASE_URL:
        if settings.STORAGE_BACKEND == "cloud":
            raise ValueError("STORAGE_BACKEND=cloud requires DATABASE_URL")
        return InMemoryDocumentRepository()

    from app.db.database import create_engine, create_session_factory
    from app.repositories.document_repo import SqlDocumentRepository

    engine = create_engine(settings.DATABASE_URL, echo=settings.SQLALCHEMY_ECHO)
    return SqlDocumentRepository(create_session_factory(engine), engine=engine)


__all__ = [
    "DocumentRepository",
    "InMemoryDocumentRepository",
    "get_document_repository",
]
