"""
Upload helpers: MIME sniffing, filename cleanup, storage paths and
size checks. Filenames and declared content types come from the
client and are never trusted as-is.
"""

import logging
import os
import re
from typing import Optional, Tuple

import filetype

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
MAX_FILENAME_LENGTH = 200

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\-.]")
_UNDERSCORE_RUNS = re.compile(r"_+")


# ============================================================
# MIME TYPES
# ============================================================

def detect_mime_type(file_content: bytes) -> str:
    """
    MIME type from the file's magic bytes (``filetype``, no libmagic).

    filetype knows binary formats only; content that decodes as UTF-8
    is reported as text/plain, anything else as octet-stream.
    """
    kind = filetype.guess(file_content)
    if kind is not None:
        return kind.mime

    try:
        file_content[:1024].decode("utf-8")
    except UnicodeDecodeError:
        return DEFAULT_MIME_TYPE
    return "text/plain"


def resolve_mime_type(declared: Optional[str], file_content: bytes) -> str:
    """
    MIME type recorded for an upload.

    The client's Content-Type is kept unless it is missing or the
    generic octet-stream, in which case the bytes are sniffed.
    """
    if declared and declared != DEFAULT_MIME_TYPE:
        return declared

    detected = detect_mime_type(file_content)
    logger.debug(f"Sniffed MIME type {detected} (declared: {declared})")
    return detected


# ============================================================
# FILENAMES AND PATHS
# ============================================================

def sanitize_filename(filename: str) -> str:
    """
    Reduce a client filename to a safe basename.

    "../../etc/passwd" -> "passwd", "my report (final).pdf" ->
    "my_report_final_.pdf". Empty results become "unnamed_file".
    """
    # Clients on Windows send backslash paths
    name = os.path.basename(filename.replace("\\", "/")).replace("\x00", "")
    name = _UNSAFE_FILENAME_CHARS.sub("_", name)
    name = _UNDERSCORE_RUNS.sub("_", name).strip("_.")

    if len(name) > MAX_FILENAME_LENGTH:
        stem, ext = os.path.splitext(name)
        name = stem[:MAX_FILENAME_LENGTH - len(ext)] + ext

    return name or "unnamed_file"


def get_file_extension(filename: str) -> str:
    """Lowercased extension with its dot ("scan.PNG" -> ".png"), or ""."""
    return os.path.splitext(sanitize_filename(filename))[1].lower()


def build_document_path(owner_id: str, document_id: str, filename: str) -> str:
    """
    Storage path of a document's bytes.

    build_document_path("u1", "3f2c...e1", "scan.PNG")
    -> "users/u1/documents/3f2c...e1.png"
    """
    return f"users/{owner_id}/documents/{document_id}{get_file_extension(filename)}"


# ============================================================
# SIZE
# ============================================================

def validate_file_size(file_size: int, max_size: int) -> Tuple[bool, Optional[str]]:
    """
    Returns:
        (True, None) when 0 < file_size <= max_size, otherwise
        (False, reason)
    """
    if file_size <= 0:
        return False, "File is empty"

    if file_size > max_size:
        return False, (
            f"File size ({format_file_size(file_size)}) exceeds "
            f"maximum ({format_file_size(max_size)})"
        )

    return True, None


def format_file_size(size_bytes: float) -> str:
    """1536 -> "1.50 KB", 1048576 -> "1.00 MB"."""
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.2f} PB"
