"""
Model base: bookkeeping timestamps shared by ORM tables.

Primary keys are declared per model; documents use the UUID string
the document store generates.
"""

from sqlalchemy import Column, DateTime, func

from app.db.database import Base


class BaseModel(Base):

    __abstract__ = True

    # Row insert time; also the tiebreaker for equal upload times
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"
