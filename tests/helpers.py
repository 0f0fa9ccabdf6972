import io
import tempfile
from pathlib import Path
from typing import Any

from fastapi import UploadFile
from starlette.datastructures import Headers

from app.core.config import Settings
from app.core.security import create_access_token

OWNER = "user-1"
OTHER_OWNER = "user-2"
TEST_SECRET_KEY = "smartdoc-test-secret"

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c63000100000500010d0a2db40000000049454e44ae426082"
)


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    """Settings isolated from the developer's .env and environment keys."""
    values: dict[str, Any] = {
        "ENV": "development",
        "SECRET_KEY": TEST_SECRET_KEY,
        "STORAGE_BACKEND": "local",
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "DATABASE_URL": None,
        "FIREBASE_PROJECT_ID": None,
        "FIREBASE_SERVICE_ACCOUNT_KEY": None,
        "FIREBASE_SERVICE_ACCOUNT_KEY_PATH": None,
        "GOOGLE_VISION_API_KEY": None,
        "OCR_SERVICE_URL": None,
        "OCR_API_KEY": None,
        "OPENAI_API_KEY": None,
        "GEMINI_API_KEY": None,
        "CLOUDINARY_CLOUD_NAME": None,
        "CLOUDINARY_API_KEY": None,
        "CLOUDINARY_API_SECRET": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_upload(
    content: bytes,
    filename: str = "test.txt",
    content_type: str | None = "text/plain",
) -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else Headers({})
    return UploadFile(file=io.BytesIO(content), filename=filename, headers=headers)


def bearer(owner_id: str, settings: Settings | None = None) -> dict[str, str]:
    settings = settings or make_settings(Path(tempfile.gettempdir()))
    return {"Authorization": f"Bearer {create_access_token(owner_id, settings=settings)}"}
