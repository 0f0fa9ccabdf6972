from sqlalchemy import Column, String, BigInteger, Text, DateTime
from .base import BaseModel


class DocumentRecord(BaseModel):
    __tablename__ = "documents"

    id = Column(String(64), primary_key=True)  # UUID4 string, generated by the store
    owner_id = Column(String(128), nullable=False, index=True)
    filename = Column(String(255), nullable=False)  # User's original filename
    size_bytes = Column(BigInteger, nullable=False)
    mime_type = Column(String(255), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, index=True)
    storage_locator = Column(String(500), nullable=False)  # Storage path

    # Overall status is derived from these two, never stored
    extraction_status = Column(String(20), default="pending", nullable=False)  # pending, processing, completed, failed
    extracted_text = Column(Text, nullable=True)
    summary_status = Column(String(20), default="pending", nullable=False)
    summary_text = Column(Text, nullable=True)
