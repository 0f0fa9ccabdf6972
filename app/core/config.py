from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
import secrets


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or .env.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"  # Ignore extra fields in .env file
    )

    # -------------------------
    # Application
    # -------------------------
    PROJECT_NAME: str = "SmartDoc API"
    ENV: str = "production"
    API_PREFIX: str = ""
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # -------------------------
    # Identity provider
    # -------------------------
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_SERVICE_ACCOUNT_KEY: Optional[str] = Field(
        default=None,
        description="Service account JSON, inline"
    )
    FIREBASE_SERVICE_ACCOUNT_KEY_PATH: Optional[str] = None

    # Development tokens (ENV=development only)
    SECRET_KEY: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    ALGORITHM: str = "HS256"
    TEST_TOKEN_EXPIRE_HOURS: int = 24

    # -------------------------
    # Storage
    # -------------------------
    STORAGE_BACKEND: str = Field(
        default="local",
        description="Storage backend: 'local' or 'cloud'"
    )
    UPLOAD_DIR: str = Field(
        default="storage/uploads",
        description="Directory for uploaded files (local storage)"
    )
    MAX_FILE_SIZE_MB: int = Field(
        default=32,
        ge=1,
        le=500,
        description="Maximum file upload size in megabytes"
    )

    @property
    def MAX_FILE_SIZE_BYTES(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    # Metadata database. Required for 'cloud', optional for 'local'
    # (documents are kept in process memory when unset).
    DATABASE_URL: Optional[str] = None
    DB_CREATE_TABLES: bool = False
    SQLALCHEMY_ECHO: bool = False

    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    CLOUDINARY_FOLDER_PREFIX: str = "smartdoc"

    # =========================================================
    # OCR backends (first configured wins)
    # =========================================================
    GOOGLE_VISION_API_KEY: Optional[str] = None
    GOOGLE_VISION_API_URL: str = "https://vision.googleapis.com/v1/images:annotate"

    OCR_SERVICE_URL: Optional[str] = Field(
        default=None,
        description="OCR.space endpoint, e.g. https://api.ocr.space/parse/image"
    )
    OCR_API_KEY: Optional[str] = None
    OCR_LANGUAGE: str = "eng"

    # =========================================================
    # Summarization backends (first configured wins)
    # =========================================================
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-3.5-turbo"

    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        description="Google Gemini API key"
    )
    GEMINI_MODEL: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model to use for summaries"
    )

    SUMMARY_MAX_TOKENS: int = Field(default=150, ge=16, le=4096)
    SUMMARY_TEMPERATURE: float = Field(default=0.3, ge=0.0, le=2.0)

    # Applies to every outbound OCR / LLM call
    BACKEND_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, le=120)

    @property
    def is_development(self) -> bool:
        return self.ENV == "development"

    @field_validator("STORAGE_BACKEND")
    def validate_storage_backend(cls, v):
        """Ensure storage backend is a valid option."""
        v = v.lower()
        allowed = {"local", "cloud"}
        if v not in allowed:
            raise ValueError(f"STORAGE_BACKEND must be one of: {allowed}")
        return v

    @field_validator("ENV")
    def validate_env(cls, v):
        v = v.lower()
        allowed = {"development", "production"}
        if v not in allowed:
            raise ValueError(f"ENV must be one of: {allowed}")
        return v

    @field_validator("ALGORITHM")
    def validate_algorithm(cls, v):
        if not v or not isinstance(v, str):
            raise ValueError("ALGORITHM must be a non-empty string.")
        return v

settings = Settings()
