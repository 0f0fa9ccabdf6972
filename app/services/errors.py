"""
Document Service Exceptions

Raised by the document store and the workflow service; the API layer
maps each one to an HTTP status.
"""


class DocumentServiceError(Exception):
    """Base exception for document operations."""
    pass


class DocumentNotFoundError(DocumentServiceError):
    """
    Document doesn't exist or belongs to someone else.

    Both cases raise the same error so callers can't tell whether an id exists.
    """
    pass


class DocumentValidationError(DocumentServiceError):
    """Upload rejected: missing, empty or malformed file."""
    pass


class FileTooLargeError(DocumentValidationError):
    """Upload exceeds MAX_FILE_SIZE_MB."""
    pass


class StorageWriteError(DocumentServiceError):
    """Bytes or metadata could not be persisted."""
    pass


class ContentUnavailableError(DocumentServiceError):
    """Stored bytes are missing or unreadable."""
    pass


class PreconditionFailedError(DocumentServiceError):
    """Operation not allowed in the document's current state."""
    pass
