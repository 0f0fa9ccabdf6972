"""
FastAPI Application Entry Point

This module initializes the FastAPI application with:
- CORS configuration
- Middleware setup
- Route registration
- Error envelope handlers
- Health check endpoints

Run locally with:
    python -m app.main
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, settings as default_settings
from app.ai.ocr import build_text_extraction_service
from app.ai.summarization import build_summarization_service
from app.api.v1.router import api_router
from app.middleware.logging import LoggingMiddleware
from app.repositories import get_document_repository
from app.repositories.document_repo import SqlDocumentRepository
from app.schemas.document import ErrorResponse
from app.services.auth_service import AuthService
from app.services.document_service import DocumentService
from app.services.document_store import DocumentStore
from app.storage import get_storage

# Configure logging
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


# ============================================================
# Service Wiring
# ============================================================
async def build_document_service(settings: Settings) -> DocumentService:
    """
    Build storage, metadata repository and processing backends from
    settings and compose them into the document service.

    Raises:
        ValueError: If the storage configuration is incomplete
    """
    storage = get_storage(settings)
    repository = get_document_repository(settings)

    if isinstance(repository, SqlDocumentRepository) and settings.DB_CREATE_TABLES:
        await repository.create_tables()

    service = DocumentService(
        store=DocumentStore(storage, repository),
        extraction_service=build_text_extraction_service(settings),
        summarization_service=build_summarization_service(settings),
        settings=settings,
    )

    logger.info(
        f"Backends: storage={storage.name}, "
        f"metadata={type(repository).__name__}, "
        f"ocr={service.extraction_service.backend.name}, "
        f"summary={service.summarization_service.backend.name}"
    )
    return service


# ============================================================
# Error Envelope
# ============================================================
def _error_name(status_code: int) -> str:
    """404 -> "NotFound", 500 -> "InternalServerError"."""
    try:
        return HTTPStatus(status_code).phrase.replace(" ", "").replace("-", "")
    except ValueError:
        return "Error"


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error=_error_name(status_code),
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Request validation errors are client errors: 400, not 422."""
        messages = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        return error_response(400, "; ".join(messages) or "Invalid request")

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        """Handle 500 errors."""
        logger.error(f"Internal server error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return error_response(500, "Internal server error")


# ============================================================
# Create FastAPI Application
# ============================================================
def create_app(
    settings: Optional[Settings] = None,
    document_service: Optional[DocumentService] = None,
    auth_service: Optional[AuthService] = None,
) -> FastAPI:
    """
    Application factory.

    Services passed in are used as-is and left open on shutdown; anything
    not passed in is built from settings at startup and closed on shutdown.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
        - Build storage, repository, OCR and summary backends
        - Set up token verification

        Shutdown:
        - Close HTTP clients and database connections
        """
        # ========== STARTUP ==========
        logger.info(f"Starting {settings.PROJECT_NAME} (env: {settings.ENV})...")
        logger.info(f"Debug mode: {settings.DEBUG}")

        owns_document_service = document_service is None
        app.state.document_service = document_service or await build_document_service(settings)
        app.state.auth_service = auth_service or AuthService(settings)

        if settings.is_development:
            logger.warning("Development mode: POST /auth/test-token is enabled")

        yield  # Application runs here

        # ========== SHUTDOWN ==========
        logger.info(f"Shutting down {settings.PROJECT_NAME}...")

        if owns_document_service:
            await app.state.document_service.close()

        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="""
        Document processing API

        Features:
        - Document upload & storage
        - OCR text extraction
        - AI summaries
        - Per-user document history
        """,
        version=APP_VERSION,
        openapi_url="/openapi.json",
        # /docs is taken by the document routes
        docs_url="/swagger",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # ----------------------------------------------------
    # Middleware Configuration
    # ----------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.DEBUG else settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    if settings.DEBUG:
        app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    # ----------------------------------------------------
    # Health Check Endpoints
    # ----------------------------------------------------
    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.PROJECT_NAME,
            "version": APP_VERSION,
            "status": "running",
            "docs": "/swagger" if settings.DEBUG else "disabled"
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint for monitoring. No authentication.

        Reports the selected backends, metadata store connectivity and
        whether bearer tokens can be verified.
        """
        service: DocumentService = request.app.state.document_service

        db_healthy = await service.store.repository.ping()
        auth_available = request.app.state.auth_service.is_available

        return {
            "status": "healthy" if db_healthy and auth_available else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "storage": service.store.storage.name,
            "database": "connected" if db_healthy else "disconnected",
            "auth": "available" if auth_available else "unavailable",
            "ocr": service.extraction_service.backend.name,
            "summary": service.summarization_service.backend.name,
        }

    # ============================================================
    # Include API Router
    # ============================================================
    app.include_router(
        api_router,
        prefix=settings.API_PREFIX
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )
