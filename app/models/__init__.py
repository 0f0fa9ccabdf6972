from app.models.base import Base
from app.models.document import DocumentRecord

__all__ = [
    "Base",
    "DocumentRecord",
]
